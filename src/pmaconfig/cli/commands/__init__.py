"""Commands __init__ - exports all commands."""

from pmaconfig.cli.commands.check import check_command
from pmaconfig.cli.commands.placeholders import placeholders_command
from pmaconfig.cli.commands.render import render_command

__all__ = ["check_command", "placeholders_command", "render_command"]
