"""Root conftest for all tests - src on sys.path and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Allow running the suite from a checkout without installing
src_root = Path(__file__).parent.parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from pmaconfig.system import config as system_config_module  # noqa: E402
from pmaconfig.system.log_system import LoggerFactory  # noqa: E402


@pytest.fixture
def example_values() -> dict[str, str]:
    """Complete value-map for the packaged template."""
    return {
        "HOSTNAME": "db.local",
        "PORT": "3306",
        "PMA_USER": "pma",
        "PMA_PASS": "secret",
        "PMA_DATABASE": "phpmyadmin",
        "UPLOADS_DIR": "/tmp",
        "BLOWFISH": "abc123",
    }


@pytest.fixture(autouse=True)
def isolated_system(monkeypatch, tmp_path):
    """Run every test from an empty directory with fresh system config and logging."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(system_config_module, "DEFAULT_SEARCH_PATHS", (tmp_path / "config" / "system.yaml",))
    monkeypatch.setattr(system_config_module, "_system_config", None)
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()
