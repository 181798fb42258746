"""
Configuration loader.

Turns a template plus a value-map into a validated Configuration:

1. Parse the template into a ``$cfg`` tree (placeholders kept verbatim)
2. Substitute every ``{TOKEN}`` from the value-map
3. Check required directives are non-empty
4. Validate into the frozen Configuration model

Loading is all-or-nothing. The first problem in file order is raised as a
single ConfigurationError subclass and nothing is returned.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from pmaconfig.config.errors import InvalidValue, MissingValue
from pmaconfig.config.models import AuthType, Configuration
from pmaconfig.config.parser import ParsedTemplate, parse_template
from pmaconfig.config.placeholders import format_key, placeholder_usage, resolve_tree
from pmaconfig.templates import DEFAULT_TEMPLATE, read_default_template

logger = structlog.get_logger()


class Loader:
    """
    Loads a phpMyAdmin configuration from a template.

    Args:
        template_path: Template file. None uses the packaged template.
        template_text: Template contents, overrides template_path when given.

    Example:
        >>> loader = Loader()
        >>> config = loader.load({"HOSTNAME": "db.local", "PORT": "3306", ...})
        >>> config.server.host
        'db.local'
    """

    def __init__(self, template_path: Path | str | None = None, template_text: str | None = None):
        self.template_path = Path(template_path) if template_path is not None else None
        self._template_text = template_text
        self._parsed: ParsedTemplate | None = None

    @property
    def source(self) -> str:
        """Template name used in log lines and error messages."""
        if self._template_text is not None:
            return "<string>"
        if self.template_path is not None:
            return str(self.template_path)
        return DEFAULT_TEMPLATE

    def read_template(self) -> str:
        """
        Return the template text.

        Raises:
            FileNotFoundError: If template_path does not exist
        """
        if self._template_text is not None:
            return self._template_text
        if self.template_path is not None:
            return self.template_path.read_text(encoding="utf-8")
        return read_default_template()

    @property
    def parsed(self) -> ParsedTemplate:
        if self._parsed is None:
            self._parsed = parse_template(self.read_template(), source=self.source)
            logger.debug(
                "loader.template_parsed",
                source=self.source,
                assignments=len(self._parsed.assignments),
            )
        return self._parsed

    def placeholders(self) -> dict[str, list[str]]:
        """Token -> directives using it, in file order. Comments are ignored."""
        return placeholder_usage(self.parsed.tree)

    def load(self, values: Mapping[str, str]) -> Configuration:
        """
        Resolve placeholders and validate.

        Args:
            values: Token -> replacement value

        Returns:
            Frozen Configuration

        Raises:
            TemplateSyntaxError: If the template cannot be parsed
            MissingValue: For the first unresolved placeholder or empty required directive
            InvalidValue: If a directive fails validation
        """
        parsed = self.parsed
        try:
            resolved = resolve_tree(parsed.tree, values)
            _check_required(resolved)
        except MissingValue as e:
            logger.error("loader.missing_value", source=self.source, directive=e.name, placeholder=e.placeholder)
            raise

        try:
            config = Configuration.model_validate(resolved)
        except ValidationError as e:
            error = _to_invalid_value(e)
            logger.error("loader.invalid_value", source=self.source, directive=error.name, reason=error.reason)
            raise error from e

        if config.model_extra:
            logger.warning("loader.unknown_directives", source=self.source, directives=sorted(config.model_extra))

        logger.info(
            "loader.configuration_loaded",
            source=self.source,
            servers=len(config.servers),
            placeholders=len(self.placeholders()),
        )
        return config


def _check_required(tree: dict[Any, Any]) -> None:
    """Directives that must be non-empty once placeholders are resolved."""
    servers = tree.get("Servers")
    if not isinstance(servers, dict):
        return

    for index, server in servers.items():
        if isinstance(server, dict) and not str(server.get("host", "")).strip():
            raise MissingValue(format_key(("Servers", index, "host")))

    cookie_auth = any(
        isinstance(server, dict) and server.get("auth_type", AuthType.COOKIE.value) == AuthType.COOKIE.value
        for server in servers.values()
    )
    if cookie_auth and not str(tree.get("blowfish_secret", "")).strip():
        raise MissingValue("blowfish_secret")


def _to_invalid_value(error: ValidationError) -> InvalidValue:
    """Report the first pydantic error against the directive it concerns."""
    first = error.errors()[0]
    location = tuple(part for part in first["loc"] if part != "[key]")
    if len(location) > 3 and location[0] == "Servers" and location[2] == "storage":
        # storage tables are written as flat server directives
        location = location[:2] + location[3:]
    name = format_key(location) if location else "configuration"
    return InvalidValue(name, first["msg"])


def load_config(values: Mapping[str, str], template_path: Path | str | None = None) -> Configuration:
    """Load the configuration from a template path (packaged template by default)."""
    return Loader(template_path).load(values)
