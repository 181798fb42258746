"""
Unit tests for system/config.py - pmaconfig tool settings.

Tests:
- TemplateConfig / OutputConfig / LoggingConfig defaults
- SystemConfig.load(): file search, merge with defaults, env substitution
- Helpers: _deep_merge(), substitute_env_vars()
- Singleton functions: get_system_config(), reload_system_config()
"""

from pathlib import Path

import pytest

from pmaconfig.system.config import (
    LoggingConfig,
    OutputConfig,
    SystemConfig,
    TemplateConfig,
    _deep_merge,
    get_system_config,
    reload_system_config,
    substitute_env_vars,
)


class TestSectionDefaults:
    def test_template_defaults(self):
        config = TemplateConfig()

        assert config.path is None
        assert config.env_prefix == "PMACONF_"

    def test_output_defaults(self):
        config = OutputConfig()

        assert config.path == "config.inc.php"
        assert config.file_mode == 0o640
        assert config.overwrite is False

    def test_logging_defaults(self):
        config = LoggingConfig()

        assert config.level == "INFO"
        assert config.format == "console"
        assert config.enable_file is False
        assert config.file_path == "logs/pmaconfig.log"

    def test_to_logger_config(self):
        logger_config = LoggingConfig(level="debug", format="json", file_path="logs/app.log").to_logger_config()

        assert logger_config.level == "DEBUG"
        assert logger_config.format == "json"
        assert logger_config.file_path == Path("logs/app.log")


class TestSystemConfigLoad:
    def test_defaults_when_no_file(self):
        assert SystemConfig.load() == SystemConfig()

    def test_missing_explicit_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="typo.yaml"):
            SystemConfig.load(tmp_path / "typo.yaml")

    def test_load_from_explicit_path(self, tmp_path):
        config_file = tmp_path / "system.yaml"
        config_file.write_text(
            """
template:
  path: /etc/pma/config.inc.php.tpl
  env_prefix: PMA_

output:
  path: /var/www/pma/config.inc.php
  file_mode: 0o600

logging:
  level: DEBUG
"""
        )

        config = SystemConfig.load(config_file)

        assert config.template.path == "/etc/pma/config.inc.php.tpl"
        assert config.template.env_prefix == "PMA_"
        assert config.output.path == "/var/www/pma/config.inc.php"
        assert config.output.file_mode == 0o600
        assert config.logging.level == "DEBUG"

    def test_partial_file_merges_with_defaults(self, tmp_path):
        config_file = tmp_path / "system.yaml"
        config_file.write_text("output:\n  overwrite: true\n")

        config = SystemConfig.load(config_file)

        assert config.output.overwrite is True
        assert config.output.path == "config.inc.php"
        assert config.template.env_prefix == "PMACONF_"

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "system.yaml"
        config_file.write_text("")

        assert SystemConfig.load(config_file) == SystemConfig()

    def test_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PMA_ROOT", "/srv/pma")
        config_file = tmp_path / "system.yaml"
        config_file.write_text('output:\n  path: "${PMA_ROOT}/config.inc.php"\n')

        assert SystemConfig.load(config_file).output.path == "/srv/pma/config.inc.php"

    def test_default_search_path(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "system.yaml").write_text("template:\n  env_prefix: X_\n")

        assert SystemConfig.load().template.env_prefix == "X_"

    @pytest.mark.parametrize("content", ["- a\n", "key: [unclosed\n"])
    def test_invalid_file(self, tmp_path, content):
        config_file = tmp_path / "system.yaml"
        config_file.write_text(content)

        with pytest.raises(ValueError):
            SystemConfig.load(config_file)


class TestDeepMerge:
    def test_nested(self):
        base = {"output": {"path": "a", "overwrite": False}, "logging": {"level": "INFO"}}
        override = {"output": {"path": "b"}}

        assert _deep_merge(base, override) == {"output": {"path": "b", "overwrite": False}, "logging": {"level": "INFO"}}

    def test_non_dict_replaces(self):
        assert _deep_merge({"a": {"x": 1}}, {"a": "flat"}) == {"a": "flat"}

    def test_base_not_modified(self):
        base = {"a": {"x": 1}}
        _deep_merge(base, {"a": {"x": 2}})

        assert base == {"a": {"x": 1}}


class TestSubstituteEnvVars:
    def test_nested_and_lists(self, monkeypatch):
        monkeypatch.setenv("VAR1", "one")

        assert substitute_env_vars({"a": {"b": "${VAR1}"}, "c": ["${VAR1}", 2]}) == {"a": {"b": "one"}, "c": ["one", 2]}

    def test_multiple_in_one_string(self, monkeypatch):
        monkeypatch.setenv("HOST", "db")
        monkeypatch.setenv("PORT", "3306")

        assert substitute_env_vars("${HOST}:${PORT}") == "db:3306"

    def test_undefined_keeps_text(self):
        assert substitute_env_vars("${PMACONF_TEST_UNDEFINED}") == "${PMACONF_TEST_UNDEFINED}"

    def test_default_value(self):
        assert substitute_env_vars("${PMACONF_TEST_UNDEFINED:-fallback}") == "fallback"

    def test_braces_placeholders_untouched(self):
        assert substitute_env_vars("{HOSTNAME}") == "{HOSTNAME}"


class TestSingleton:
    def test_get_is_cached(self):
        assert get_system_config() is get_system_config()

    def test_reload_replaces(self, tmp_path):
        first = get_system_config()
        config_file = tmp_path / "system.yaml"
        config_file.write_text("output:\n  path: other.php\n")

        reloaded = reload_system_config(config_file)

        assert reloaded is not first
        assert get_system_config().output.path == "other.php"
