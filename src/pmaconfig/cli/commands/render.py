"""Render the resolved configuration file."""

import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

import click
import structlog
from rich.console import Console
from rich.markup import escape

from pmaconfig.cli.commands.common import (
    build_loader,
    build_values,
    describe_error,
    template_option,
    values_options,
)
from pmaconfig.config.errors import ConfigurationError
from pmaconfig.config.renderer import render_config
from pmaconfig.system.config import get_system_config

# Status goes to stderr: the rendered file may be going to stdout
console = Console(stderr=True)
logger = structlog.get_logger()


@click.command("render")
@template_option
@values_options
@click.option(
    "--output",
    "-o",
    "output",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    help="Destination file, '-' for stdout (default: output.path from system.yaml)",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing output file")
def render_command(
    template_path: Optional[Path],
    values_file: Optional[Path],
    assignments: tuple[str, ...],
    output: Optional[Path],
    force: bool,
):
    """
    Resolve placeholders and write config.inc.php.

    Nothing is written unless the whole configuration is valid.

    Example:
        pmaconfig render --values values.yaml -o /var/www/pma/config.inc.php
        pmaconfig render --set HOSTNAME=db.local ... -o -
    """
    system_config = get_system_config()

    try:
        loader = build_loader(template_path)
        config = loader.load(build_values(values_file, assignments))
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[bold red]✗ Configuration invalid:[/bold red] {escape(describe_error(e))}")
        sys.exit(1)

    text = render_config(config)

    if output is None:
        output = Path(system_config.output.path)

    if str(output) == "-":
        click.echo(text, nl=False)
        return

    if output.exists() and not (force or system_config.output.overwrite):
        console.print(f"[red]Error: {output} already exists (use --force to overwrite)[/red]")
        sys.exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    _write_private(output, text, system_config.output.file_mode)
    logger.info("render.written", path=str(output), mode=oct(system_config.output.file_mode))
    console.print(f"[bold green]✓ Wrote[/bold green] {output}")


def _write_private(path: Path, text: str, mode: int) -> None:
    """
    Atomically replace path with text.

    The data goes to a temporary file in the same directory that already has
    its final mode, then is renamed over path. Secrets are never readable
    under the umask default or the mode of a file being overwritten.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            os.fchmod(f.fileno(), mode)
            f.write(text)
        os.replace(tmp_name, path)
    finally:
        Path(tmp_name).unlink(missing_ok=True)
