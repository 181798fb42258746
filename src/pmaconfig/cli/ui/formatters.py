"""Rich table formatters for CLI output."""

from collections.abc import Mapping

from rich.markup import escape
from rich.table import Table

from pmaconfig.config.models import Configuration, StorageRole


def create_placeholder_table(usage: Mapping[str, list[str]], values: Mapping[str, str]) -> Table:
    """
    Create a table of template placeholders.

    Args:
        usage: Token -> directives using it
        values: Currently available token values

    Returns:
        Rich Table with one row per token
    """
    table = Table(title="Template Placeholders", show_header=True, header_style="bold cyan")
    table.add_column("Placeholder", style="green", no_wrap=True)
    table.add_column("Used by", style="white")
    table.add_column("Supplied", justify="center")

    for token, directives in usage.items():
        supplied = "[green]✓[/green]" if token in values else "[red]✗[/red]"
        table.add_row(f"{{{token}}}", escape(", ".join(directives)), supplied)
    return table


def create_server_table(config: Configuration) -> Table:
    """
    Create a summary table of configured servers.

    Storage is shown as "configured/total" roles.
    """
    table = Table(title="Servers", show_header=True, header_style="bold cyan")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Host", style="green")
    table.add_column("Port", style="white")
    table.add_column("Auth", style="yellow")
    table.add_column("Storage DB", style="magenta")
    table.add_column("Tables", justify="right")

    total_roles = len(StorageRole)
    for index in sorted(config.servers):
        server = config.servers[index]
        table.add_row(
            str(index),
            escape(server.host),
            escape(server.port or "default"),
            server.auth_type.value,
            escape(server.pmadb or "-"),
            f"{len(server.storage)}/{total_roles}",
        )
    return table


def create_settings_table(config: Configuration) -> Table:
    """Create a table of the security-relevant global settings."""
    table = Table(title="Settings", show_header=True, header_style="bold cyan")
    table.add_column("Directive", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    rows = [
        ("blowfish_secret", "set" if config.blowfish_secret else "[red]empty[/red]"),
        ("SendErrorReports", config.send_error_reports.value),
        ("LoginCookieValidity", f"{config.login_cookie_validity}s"),
        ("AllowArbitraryServer", str(config.allow_arbitrary_server).lower()),
        ("ShowPhpInfo", str(config.show_php_info).lower()),
        ("UploadDir", escape(config.upload_dir) or "-"),
        ("DefaultCharset", escape(config.default_charset)),
    ]
    for directive, value in rows:
        table.add_row(directive, value)
    return table
