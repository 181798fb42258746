"""
System configuration for pmaconfig itself.

These are the settings of the provisioning tool (where the template lives,
which environment prefix feeds placeholders, where output goes, how to
log), not the phpMyAdmin configuration it produces.

Search order for the settings file:
1. Path passed to SystemConfig.load() (must exist)
2. ./config/system.yaml
3. ~/.pmaconfig/system.yaml
4. Built-in defaults

Example system.yaml:
    template:
      path: /etc/imscp/pma/config.inc.php.tpl
      env_prefix: PMACONF_

    output:
      path: ${PMA_ROOT:-/var/www/pma}/config.inc.php
      file_mode: 0o640

    logging:
      level: INFO
      format: console
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pmaconfig.system.log_system import LoggingConfig as LoggerConfig

_ENV_VAR_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

DEFAULT_SEARCH_PATHS = (
    Path("config/system.yaml"),
    Path.home() / ".pmaconfig" / "system.yaml",
)


@dataclass
class TemplateConfig:
    """Where the template comes from and how placeholder values are found."""

    path: str | None = None  # None = packaged template
    env_prefix: str = "PMACONF_"


@dataclass
class OutputConfig:
    """Where the rendered configuration file is written."""

    path: str = "config.inc.php"
    file_mode: int = 0o640
    overwrite: bool = False


@dataclass
class LoggingConfig:
    """Logging settings as they appear in system.yaml."""

    level: str = "INFO"
    format: str = "console"
    timestamp_format: str = "compact"
    enable_file: bool = False
    file_path: str = "logs/pmaconfig.log"
    file_level: str = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the pydantic model consumed by LoggerFactory."""
        return LoggerConfig(
            level=self.level.upper(),  # type: ignore[arg-type]
            format=self.format,  # type: ignore[arg-type]
            timestamp_format=self.timestamp_format,  # type: ignore[arg-type]
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level.upper(),  # type: ignore[arg-type]
            file_rotation=self.file_rotation,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class SystemConfig:
    """Complete tool configuration."""

    template: TemplateConfig = field(default_factory=TemplateConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration, falling back to defaults when no file exists.

        Args:
            path: Explicit settings file. It must exist.

        Returns:
            SystemConfig with file values merged over defaults

        Raises:
            FileNotFoundError: If an explicit path does not exist
            ValueError: If the file is not valid YAML or not a mapping
        """
        config_path = _find_config(Path(path) if path is not None else None)
        if config_path is None:
            return cls()

        try:
            with open(config_path) as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid system config {config_path}: {e}")

        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid system config {config_path}: expected a mapping")

        merged = _deep_merge(_defaults_dict(), substitute_env_vars(raw))
        return cls._from_dict(merged)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        template = data.get("template") or {}
        output = data.get("output") or {}
        logging_data = data.get("logging") or {}
        if "file_mode" in output and isinstance(output["file_mode"], str):
            output = {**output, "file_mode": int(output["file_mode"], 8)}
        try:
            return cls(
                template=TemplateConfig(**template),
                output=OutputConfig(**output),
                logging=LoggingConfig(**logging_data),
            )
        except TypeError as e:
            raise ValueError(f"Unknown setting in system config: {e}")


def _find_config(explicit: Path | None) -> Path | None:
    if explicit is not None:
        if not explicit.exists():
            raise FileNotFoundError(f"System config not found: {explicit}")
        return explicit
    for candidate in DEFAULT_SEARCH_PATHS:
        if candidate.exists():
            return candidate
    return None


def _defaults_dict() -> dict[str, Any]:
    defaults = SystemConfig()
    return {
        "template": vars(defaults.template).copy(),
        "output": vars(defaults.output).copy(),
        "logging": vars(defaults.logging).copy(),
    }


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base (override wins)."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def substitute_env_vars(config: Any) -> Any:
    """
    Expand ``${VAR}`` and ``${VAR:-default}`` in strings of a nested structure.

    Undefined variables without a default keep their ``${VAR}`` text.
    """
    if isinstance(config, str):

        def replace(match: re.Match[str]) -> str:
            name, default = match.group(1), match.group(2)
            if name in os.environ:
                return os.environ[name]
            if default is not None:
                return default
            return match.group(0)

        return _ENV_VAR_RE.sub(replace, config)
    if isinstance(config, dict):
        return {key: substitute_env_vars(value) for key, value in config.items()}
    if isinstance(config, list):
        return [substitute_env_vars(value) for value in config]
    return config


_system_config: SystemConfig | None = None


def get_system_config() -> SystemConfig:
    """Get the system config singleton, loading it on first use."""
    global _system_config
    if _system_config is None:
        _system_config = SystemConfig.load()
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Force a reload (e.g. after the CLI received --config)."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
