"""Packaged configuration templates."""

from importlib.resources import files

DEFAULT_TEMPLATE = "config.inc.php.tpl"


def read_default_template() -> str:
    """Return the text of the packaged phpMyAdmin configuration template."""
    return files(__package__).joinpath(DEFAULT_TEMPLATE).read_text(encoding="utf-8")
