"""Unit tests for placeholder discovery and substitution."""

import pytest

from pmaconfig.config.errors import MissingValue
from pmaconfig.config.placeholders import (
    find_placeholders,
    format_key,
    has_placeholders,
    placeholder_usage,
    resolve_tree,
    substitute,
)


def test_find_placeholders_in_order_without_duplicates():
    text = "{HOSTNAME}:{PORT} {HOSTNAME} {lower} { SPACED } {PMA_USER2}"

    assert find_placeholders(text) == ["HOSTNAME", "PORT", "PMA_USER2"]


def test_substitute_replaces_every_token():
    assert substitute("{USER}@{HOST}", {"USER": "pma", "HOST": "db"}) == "pma@db"


def test_substitute_leaves_non_tokens_alone():
    assert substitute("{task.description} {}", {}) == "{task.description} {}"


def test_substitute_missing_names_token_without_key():
    with pytest.raises(MissingValue) as exc_info:
        substitute("{HOST}", {})

    assert exc_info.value.name == "HOST"
    assert exc_info.value.placeholder == "HOST"


def test_substitute_missing_names_key_when_given():
    with pytest.raises(MissingValue) as exc_info:
        substitute("{BLOWFISH}", {}, key="blowfish_secret")

    assert str(exc_info.value) == "blowfish_secret"
    assert exc_info.value.placeholder == "BLOWFISH"


def test_values_are_not_rescanned():
    assert substitute("{A}", {"A": "{B}"}) == "{B}"


def test_format_key():
    assert format_key(("blowfish_secret",)) == "blowfish_secret"
    assert format_key(("Servers", 1, "host")) == "Servers[1].host"
    assert format_key(()) == ""


def test_resolve_tree_nested():
    tree = {"a": "{X}", "Servers": {1: {"host": "{X}-{Y}", "compress": True}}, "list": ["{Y}", 3]}

    resolved = resolve_tree(tree, {"X": "x", "Y": "y"})

    assert resolved == {"a": "x", "Servers": {1: {"host": "x-y", "compress": True}}, "list": ["y", 3]}
    assert tree["a"] == "{X}"  # input untouched


def test_resolve_tree_reports_first_missing_directive():
    tree = {"Servers": {1: {"host": "{HOST}", "port": "{PORT}"}}}

    with pytest.raises(MissingValue) as exc_info:
        resolve_tree(tree, {"PORT": "3306"})

    assert exc_info.value.name == "Servers[1].host"
    assert exc_info.value.placeholder == "HOST"


def test_has_placeholders():
    assert has_placeholders({"a": ["x", "{Y}"]})
    assert not has_placeholders({"a": ["x", 1, None]})
    assert has_placeholders({"{KEY}": "x"})


def test_placeholder_usage():
    tree = {"blowfish_secret": "{BLOWFISH}", "Servers": {1: {"host": "{HOSTNAME}", "controlhost": "{HOSTNAME}"}}}

    assert placeholder_usage(tree) == {
        "BLOWFISH": ["blowfish_secret"],
        "HOSTNAME": ["Servers[1].host", "Servers[1].controlhost"],
    }


def test_resolve_tree_substitutes_keys():
    tree = {"{NAME}": "{VALUE}", "Servers": {1: {"host": "db"}}}

    resolved = resolve_tree(tree, {"NAME": "ThemeDefault", "VALUE": "pmahomme"})

    assert resolved == {"ThemeDefault": "pmahomme", "Servers": {1: {"host": "db"}}}


def test_resolve_tree_missing_key_token():
    tree = {"Servers": {1: {"{OPTION}": "on"}}}

    with pytest.raises(MissingValue) as exc_info:
        resolve_tree(tree, {})

    assert exc_info.value.name == "Servers[1].{OPTION}"
    assert exc_info.value.placeholder == "OPTION"


def test_placeholder_usage_includes_keys():
    tree = {"{NAME}": "fixed", "other": "{VALUE}"}

    assert placeholder_usage(tree) == {"NAME": ["{NAME}"], "VALUE": ["other"]}
