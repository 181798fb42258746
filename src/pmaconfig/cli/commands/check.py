"""Validate a configuration without writing it."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from pmaconfig.cli.commands.common import (
    build_loader,
    build_values,
    describe_error,
    template_option,
    values_options,
)
from pmaconfig.cli.ui import create_server_table, create_settings_table
from pmaconfig.config.errors import ConfigurationError

console = Console()


@click.command("check")
@template_option
@values_options
def check_command(
    template_path: Optional[Path],
    values_file: Optional[Path],
    assignments: tuple[str, ...],
):
    """
    Resolve placeholders and validate the configuration.

    Exits with status 1 and names the failing directive if anything is
    missing or invalid.

    Example:
        PMACONF_BLOWFISH=... pmaconfig check --values values.yaml
    """
    try:
        loader = build_loader(template_path)
        config = loader.load(build_values(values_file, assignments))
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[bold red]✗ Configuration invalid:[/bold red] {escape(describe_error(e))}")
        sys.exit(1)

    console.print(create_server_table(config))
    console.print(create_settings_table(config))
    console.print(f"[bold green]✓ Configuration valid[/bold green] [dim]({loader.source})[/dim]")
