"""
System configuration package.

Settings of the pmaconfig tool itself (template location, output, logging).

Exports:
    - SystemConfig: Complete tool configuration dataclass
    - get_system_config: Get system config singleton
    - reload_system_config: Force reload system config
    - LoggerFactory: Factory for creating configured loggers
    - LoggingConfig: Logging configuration model
"""

from pmaconfig.system.config import SystemConfig, get_system_config, reload_system_config
from pmaconfig.system.log_system import LoggerFactory, LoggingConfig

__all__ = [
    "SystemConfig",
    "get_system_config",
    "reload_system_config",
    "LoggerFactory",
    "LoggingConfig",
]
