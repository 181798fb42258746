"""Render a Configuration back to a phpMyAdmin configuration file."""

import math
from decimal import Decimal
from enum import Enum
from typing import Any

from pmaconfig import __version__
from pmaconfig.config.models import Configuration

HEADER = """<?php
/**
 * phpMyAdmin configuration.
 *
 * Generated by pmaconfig {version}. Changes are lost on the next provisioning run.
 */
"""


def php_literal(value: Any) -> str:
    """
    Format a Python value as a PHP literal.

    Strings are single-quoted (only ``\\`` and ``'`` need escaping there),
    so no ``$`` interpolation can happen in the rendered file.
    """
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return repr(value)
    if isinstance(value, float):
        return _php_float(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(php_literal(item) for item in value) + "]"
    if isinstance(value, dict):
        items = ", ".join(f"{php_literal(k)} => {php_literal(v)}" for k, v in value.items())
        return f"[{items}]"
    raise TypeError(f"Cannot render {type(value).__name__} as a PHP literal")


def _php_float(value: float) -> str:
    """Fixed-point float literal, never exponent notation (``1e-05`` -> ``0.00001``)."""
    if not math.isfinite(value):
        raise ValueError(f"Cannot render non-finite float {value!r} as a PHP literal")
    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


def render_config(config: Configuration) -> str:
    """
    Render the configuration file text.

    Args:
        config: Validated configuration

    Returns:
        PHP source that parses back to an equal Configuration
    """
    directives = config.to_directives()
    lines = [HEADER.format(version=__version__)]

    lines.append(f"$cfg['blowfish_secret'] = {php_literal(directives.pop('blowfish_secret'))};")
    lines.append("")

    lines.append("/* Servers configuration */")
    for index, server in directives.pop("Servers").items():
        lines.append(f"$i = {index};")
        for key, value in server.items():
            lines.append(f"$cfg['Servers'][$i][{php_literal(key)}] = {php_literal(value)};")
        lines.append("")

    for key, value in directives.items():
        lines.append(f"$cfg[{php_literal(key)}] = {php_literal(value)};")

    return "\n".join(lines) + "\n"
