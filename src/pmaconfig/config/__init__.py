"""
phpMyAdmin configuration package.

Exports:
    - Configuration, ServerEntry: Validated configuration models
    - Loader, load_config: Template + values -> Configuration
    - render_config: Configuration -> config.inc.php text
    - collect_values: Value-map from environment, file and KEY=VALUE pairs
    - ConfigurationError, MissingValue, InvalidValue, TemplateSyntaxError
"""

from pmaconfig.config.errors import ConfigurationError, InvalidValue, MissingValue, TemplateSyntaxError
from pmaconfig.config.loader import Loader, load_config
from pmaconfig.config.models import (
    AuthType,
    Configuration,
    ConnectType,
    ErrorReportPolicy,
    RecodingEngine,
    ServerEntry,
    StorageRole,
)
from pmaconfig.config.renderer import render_config
from pmaconfig.config.values import collect_values

__all__ = [
    "AuthType",
    "Configuration",
    "ConfigurationError",
    "ConnectType",
    "ErrorReportPolicy",
    "InvalidValue",
    "Loader",
    "MissingValue",
    "RecodingEngine",
    "ServerEntry",
    "StorageRole",
    "TemplateSyntaxError",
    "collect_values",
    "load_config",
    "render_config",
]
