"""End-to-end provisioning: template + values -> validated config -> rendered file."""

import pytest
from pydantic import ValidationError

from pmaconfig.config import Loader, collect_values, render_config
from pmaconfig.config.models import StorageRole
from pmaconfig.config.parser import parse_template
from pmaconfig.config.placeholders import find_placeholders


def test_provision_from_environment_and_file(tmp_path, monkeypatch):
    monkeypatch.setenv("PMACONF_BLOWFISH", "0123456789abcdef0123456789abcdef")
    monkeypatch.setenv("PMACONF_PMA_PASS", "from-env")
    values_file = tmp_path / "values.yaml"
    values_file.write_text(
        "HOSTNAME: mysql.internal\nPORT: 3306\nPMA_USER: pma\nPMA_DATABASE: phpmyadmin\nUPLOADS_DIR: /var/uploads\n"
    )

    values = collect_values(values_file=values_file, assignments=["PMA_PASS=from-args"])
    loader = Loader()
    config = loader.load(values)

    assert set(loader.placeholders()) <= set(values)
    assert config.server.host == "mysql.internal"
    assert config.server.controlpass == "from-args"

    output = tmp_path / "config.inc.php"
    output.write_text(render_config(config))
    text = output.read_text()

    assert find_placeholders(text) == []
    tree = parse_template(text).tree
    assert tree["Servers"][1]["controlhost"] == "mysql.internal"
    assert tree["UploadDir"] == "/var/uploads"
    assert tree["blowfish_secret"] == "0123456789abcdef0123456789abcdef"


def test_loaded_configuration_is_immutable(example_values):
    config = Loader().load(example_values)

    with pytest.raises(ValidationError):
        config.upload_dir = "/elsewhere"
    with pytest.raises(TypeError):
        config.servers[2] = config.servers[1]
    with pytest.raises(TypeError):
        config.server.storage[StorageRole.HISTORY] = "hacked"

    assert config.upload_dir == "/tmp"
    assert list(config.servers) == [1]
    assert config.server.table_for(StorageRole.HISTORY) == "pma__history"
