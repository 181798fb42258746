"""CLI UI components - Rich table formatters."""

from pmaconfig.cli.ui.formatters import create_placeholder_table, create_server_table, create_settings_table

__all__ = [
    "create_placeholder_table",
    "create_server_table",
    "create_settings_table",
]
