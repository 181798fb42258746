"""Options and helpers shared by the provisioning commands."""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import click

from pmaconfig.config.loader import Loader
from pmaconfig.config.values import collect_values
from pmaconfig.system.config import get_system_config


def template_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--template",
        "-t",
        "template_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Template file (default: template.path from system.yaml, else the packaged template)",
    )(func)


def values_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "--set",
        "-s",
        "assignments",
        multiple=True,
        metavar="KEY=VALUE",
        help="Placeholder value, e.g. --set HOSTNAME=db.local (repeatable, highest precedence)",
    )(func)
    func = click.option(
        "--values",
        "-v",
        "values_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML file mapping placeholder names to values",
    )(func)
    return func


def build_loader(template_path: Path | None) -> Loader:
    """Loader for an explicit template, the configured one, or the packaged one."""
    if template_path is None:
        configured = get_system_config().template.path
        if configured:
            template_path = Path(configured)
    return Loader(template_path)


def build_values(values_file: Path | None, assignments: Iterable[str]) -> dict[str, str]:
    """Value-map from the configured environment prefix, values file and --set pairs."""
    env_prefix = get_system_config().template.env_prefix
    return collect_values(env_prefix=env_prefix, values_file=values_file, assignments=assignments)


def describe_error(error: Exception) -> str:
    """Operator-facing message for a configuration failure."""
    describe = getattr(error, "describe", None)
    return describe() if describe else str(error)
