"""List the placeholders of a template."""

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
from pmaconfig.cli.ui import create_placeholder_table
from pmaconfig.config.errors import ConfigurationError

console = Console()


@click.command("placeholders")
@template_option
@values_options
@click.option("--strict", is_flag=True, help="Exit with status 1 if any placeholder has no value")
def placeholders_command(
    template_path: Optional[Path],
    values_file: Optional[Path],
    assignments: tuple[str, ...],
    strict: bool,
):
    """
    List template placeholders and whether a value is available for each.

    Example:
        pmaconfig placeholders
        pmaconfig placeholders --values values.yaml --strict
    """
    try:
        loader = build_loader(template_path)
        usage = loader.placeholders()
        values = build_values(values_file, assignments)
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(describe_error(e))}[/red]")
        sys.exit(1)

    if not usage:
        console.print(f"[yellow]No placeholders in {loader.source}[/yellow]")
        return

    console.print(create_placeholder_table(usage, values))

    missing = [token for token in usage if token not in values]
    if missing:
        console.print(f"[yellow]{len(missing)} placeholder(s) without a value: {', '.join(missing)}[/yellow]")
        if strict:
            sys.exit(1)
    else:
        console.print("[green]All placeholders have values[/green]")
