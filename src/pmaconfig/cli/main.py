"""pmaconfig CLI main entry point."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from pmaconfig import __version__
from pmaconfig.cli.commands import check_command, placeholders_command, render_command
from pmaconfig.system.config import reload_system_config
from pmaconfig.system.log_system import LoggerFactory

console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Tool settings file (default: config/system.yaml, ~/.pmaconfig/system.yaml)",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override logging level",
)
def main(config_path: Optional[Path], log_level: Optional[str]):
    """pmaconfig - phpMyAdmin configuration provisioning"""
    try:
        system_config = reload_system_config(config_path)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]✗ Invalid system config:[/bold red] {escape(str(e))}")
        sys.exit(1)
    logger_config = system_config.logging.to_logger_config()
    if log_level:
        logger_config.level = log_level.upper()  # type: ignore[assignment]
    LoggerFactory.configure(logger_config)


# Register commands
main.add_command(placeholders_command)
main.add_command(check_command)
main.add_command(render_command)


if __name__ == "__main__":
    main()
