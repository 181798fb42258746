"""
pmaconfig - phpMyAdmin configuration provisioning

Resolves the placeholders of a phpMyAdmin configuration template, validates
the result and renders the final config.inc.php.
"""

from importlib.metadata import version

try:
    __version__ = version("pmaconfig")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
