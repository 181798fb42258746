"""Tests for centralized logging configuration."""

import json
import logging
from logging.handlers import RotatingFileHandler

from pmaconfig.system import LoggerFactory, LoggingConfig


def test_default_configuration():
    logger = LoggerFactory.get_logger()

    assert LoggerFactory.is_configured()
    assert hasattr(logger, "info")

    config = LoggerFactory.get_config()
    assert config.level == "INFO"
    assert config.format == "console"
    assert config.enable_file is False


def test_explicit_configuration():
    LoggerFactory.configure(LoggingConfig(level="DEBUG", format="json"))

    assert LoggerFactory.get_config().level == "DEBUG"
    assert LoggerFactory.get_config().format == "json"


def test_console_goes_to_stderr(capsys):
    LoggerFactory.configure(LoggingConfig(level="INFO"))

    LoggerFactory.get_logger("test.module").info("loader.configuration_loaded", servers=1)

    captured = capsys.readouterr()
    assert "loader.configuration_loaded" in captured.err
    assert "servers=1" in captured.err
    assert "loader.configuration_loaded" not in captured.out


def test_file_logging_writes_json_lines(tmp_path):
    log_file = tmp_path / "logs" / "pmaconfig.log"
    LoggerFactory.configure(
        LoggingConfig(enable_file=True, file_path=log_file, file_level="INFO", file_rotation=False)
    )

    LoggerFactory.get_logger().info("render.written", path="/tmp/config.inc.php")

    entry = json.loads(log_file.read_text().strip().splitlines()[-1])
    assert entry["event"] == "render.written"
    assert entry["path"] == "/tmp/config.inc.php"


def test_file_logging_default_path():
    LoggerFactory.configure(LoggingConfig(enable_file=True, file_path=None))

    assert str(LoggerFactory.get_config().file_path) == "logs/pmaconfig.log"


def test_rotating_file_handler(tmp_path):
    log_file = tmp_path / "rotating.log"
    LoggerFactory.configure(
        LoggingConfig(enable_file=True, file_path=log_file, file_rotation=True, max_file_size_mb=1, backup_count=2)
    )

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    assert len(handlers) == 1
    assert handlers[0].maxBytes == 1024 * 1024
    assert handlers[0].backupCount == 2


def test_file_level_filters(tmp_path):
    log_file = tmp_path / "app.log"
    LoggerFactory.configure(
        LoggingConfig(level="DEBUG", enable_file=True, file_path=log_file, file_level="WARNING", file_rotation=False)
    )

    logger = LoggerFactory.get_logger()
    logger.info("values.collected", count=3)
    logger.warning("loader.unknown_directives", directives=["ThemeDefault"])

    content = log_file.read_text()
    assert "loader.unknown_directives" in content
    assert "values.collected" not in content


def test_reset_clears_configuration():
    LoggerFactory.configure(LoggingConfig(level="DEBUG"))
    LoggerFactory.reset()

    assert not LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "INFO"
