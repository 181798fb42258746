"""Placeholder token discovery and substitution.

Templates mark provisioning-time values with ``{TOKEN}`` markers, where
TOKEN is an upper-case identifier (``{HOSTNAME}``, ``{PMA_USER}``). Braces
around anything else (lower-case text, spaces, punctuation) are left alone.

Substitution is strict: a token without a value raises MissingValue, so a
resolved configuration never carries a placeholder.
"""

import re
from collections.abc import Mapping
from typing import Any

from pmaconfig.config.errors import MissingValue

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Z][A-Z0-9_]*)\}")


def find_placeholders(text: str) -> list[str]:
    """Return the tokens used in text, in order of first appearance."""
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_PATTERN.finditer(text):
        seen.setdefault(match.group(1), None)
    return list(seen)


def has_placeholders(value: Any) -> bool:
    """Check whether a string (or any nested dict/list of strings) holds a token."""
    if isinstance(value, str):
        return PLACEHOLDER_PATTERN.search(value) is not None
    if isinstance(value, Mapping):
        return any(has_placeholders(k) or has_placeholders(v) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return any(has_placeholders(v) for v in value)
    return False


def substitute(text: str, values: Mapping[str, str], key: str | None = None) -> str:
    """
    Replace every ``{TOKEN}`` in text with its value.

    Args:
        text: String possibly containing placeholder tokens
        values: Token name -> replacement value
        key: Directive the text belongs to, used to name the failure

    Returns:
        Text with all tokens replaced

    Raises:
        MissingValue: If a token has no entry in values
    """

    def replace(match: re.Match[str]) -> str:
        token = match.group(1)
        if token not in values:
            raise MissingValue(key or token, placeholder=token)
        return str(values[token])

    return PLACEHOLDER_PATTERN.sub(replace, text)


def format_key(path: tuple[Any, ...]) -> str:
    """Format a directive path the way operators write it: ``Servers[1].host``."""
    if not path:
        return ""
    parts = [str(path[0])]
    for element in path[1:]:
        if isinstance(element, int):
            parts.append(f"[{element}]")
        else:
            parts.append(f".{element}")
    return "".join(parts)


def resolve_tree(tree: Any, values: Mapping[str, str], _path: tuple[Any, ...] = ()) -> Any:
    """
    Substitute placeholders in every string of a nested dict/list structure.

    String dict keys are substituted too. Dicts are walked in insertion
    order, so the first unresolved token in file order is the one reported.

    Args:
        tree: Parsed template tree
        values: Token name -> replacement value

    Returns:
        New tree with all placeholders replaced (input is not modified)

    Raises:
        MissingValue: Naming the directive holding the first unresolved token
    """
    if isinstance(tree, str):
        return substitute(tree, values, key=format_key(_path) or None)
    if isinstance(tree, dict):
        resolved = {}
        for k, v in tree.items():
            if isinstance(k, str):
                k = substitute(k, values, key=format_key(_path + (k,)))
            resolved[k] = resolve_tree(v, values, _path + (k,))
        return resolved
    if isinstance(tree, list):
        return [resolve_tree(v, values, _path + (i,)) for i, v in enumerate(tree)]
    return tree


def placeholder_usage(tree: Any, _path: tuple[Any, ...] = ()) -> dict[str, list[str]]:
    """Map each token to the directives that reference it."""
    usage: dict[str, list[str]] = {}

    def walk(node: Any, path: tuple[Any, ...]) -> None:
        if isinstance(node, str):
            for token in find_placeholders(node):
                usage.setdefault(token, []).append(format_key(path))
        elif isinstance(node, dict):
            for k, v in node.items():
                if isinstance(k, str):
                    for token in find_placeholders(k):
                        usage.setdefault(token, []).append(format_key(path + (k,)))
                walk(v, path + (k,))
        elif isinstance(node, list):
            for i, v in enumerate(node):
                walk(v, path + (i,))

    walk(tree, _path)
    return usage
