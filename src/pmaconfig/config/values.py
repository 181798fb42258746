"""Placeholder value sources.

A value-map (token -> replacement) is merged from three sources, later
sources winning:

1. Environment variables carrying a prefix (``PMACONF_HOSTNAME`` -> ``HOSTNAME``)
2. A YAML values file holding a flat mapping of tokens
3. Explicit ``KEY=VALUE`` pairs (CLI ``--set``)

Example values file:
    HOSTNAME: db.local
    PORT: 3306
    PMA_USER: pma
    PMA_PASS: "${PMA_PASS_FROM_VAULT}"
    BLOWFISH: abc123
"""

import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml

from pmaconfig.config.errors import ConfigurationError
from pmaconfig.system.config import substitute_env_vars

logger = structlog.get_logger()


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def values_from_env(prefix: str, environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """
    Collect token values from prefixed environment variables.

    Args:
        prefix: Variable prefix, stripped from the token name. Empty string
            takes every variable as-is.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Token -> value
    """
    environ = os.environ if environ is None else environ
    if not prefix:
        return dict(environ)
    return {name[len(prefix) :]: value for name, value in environ.items() if name.startswith(prefix) and name != prefix}


def values_from_file(path: Path) -> dict[str, str]:
    """
    Load token values from a YAML file.

    ``${VAR}`` references inside the file are expanded from the environment,
    so secrets can stay out of the file itself.

    Raises:
        FileNotFoundError: If path does not exist
        ConfigurationError: If the file is not a flat mapping of scalars
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid values file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid values file {path}: expected a mapping of placeholder names")

    data = substitute_env_vars(data)
    values: dict[str, str] = {}
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            raise ConfigurationError(f"Invalid values file {path}: value for {key!r} must be a scalar")
        values[str(key)] = _stringify(value)
    return values


def parse_assignments(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings. Values may contain ``=``; keys may not be empty."""
    values: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(f"Expected KEY=VALUE, got {pair!r}")
        values[key] = value
    return values


def collect_values(
    env_prefix: str | None = "PMACONF_",
    values_file: Path | None = None,
    assignments: Iterable[str] = (),
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Merge the value-map from all sources.

    Args:
        env_prefix: Prefix for environment variables, None to ignore the environment
        values_file: Optional YAML file of token values
        assignments: ``KEY=VALUE`` strings with the highest precedence
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Token -> value
    """
    values: dict[str, str] = {}
    if env_prefix is not None:
        from_env = values_from_env(env_prefix, environ)
        values.update(from_env)
        logger.debug("values.collected", source="environment", prefix=env_prefix, count=len(from_env))
    if values_file is not None:
        from_file = values_from_file(values_file)
        values.update(from_file)
        logger.debug("values.collected", source="file", path=str(values_file), count=len(from_file))
    explicit = parse_assignments(assignments)
    values.update(explicit)
    if explicit:
        logger.debug("values.collected", source="arguments", count=len(explicit))
    return values
