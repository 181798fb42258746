"""Parser for phpMyAdmin-style configuration files.

The configuration format is a flat list of PHP assignment statements
rooted at a single array variable::

    <?php
    $cfg['blowfish_secret'] = '{BLOWFISH}';
    $i = 0;
    $i++;
    $cfg['Servers'][$i]['host'] = '{HOSTNAME}';
    $cfg['Servers'][$i]['compress'] = true;

Only the subset needed for configuration files is understood: comments,
literal values (strings, numbers, booleans, null, arrays), integer counter
variables used as indices, and ``++``/``--`` on those counters. Anything
else is a TemplateSyntaxError carrying the offending line number.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from pmaconfig.config.errors import TemplateSyntaxError

ROOT_VARIABLE = "cfg"

_TOKEN_SPEC = [
    ("BLOCK_COMMENT", r"/\*.*?\*/"),
    ("LINE_COMMENT", r"(?://|#)[^\n]*"),
    ("OPEN_TAG", r"<\?php\b"),
    ("CLOSE_TAG", r"\?>"),
    ("VARIABLE", r"\$[A-Za-z_]\w*"),
    ("SQ_STRING", r"'(?:[^'\\]|\\.)*'"),
    ("DQ_STRING", r'"(?:[^"\\]|\\.)*"'),
    ("INCREMENT", r"\+\+|--"),
    ("NUMBER", r"-?\d+(?:\.\d+)?"),
    ("ARROW", r"=>"),
    ("NAME", r"[A-Za-z_]\w*"),
    ("PUNCT", r"[\[\]();=,]"),
    ("WHITESPACE", r"\s+"),
    ("MISMATCH", r"."),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC), re.DOTALL)
_INT_KEY_RE = re.compile(r"^(?:0|-?[1-9]\d*)$")
_SKIPPED = {"BLOCK_COMMENT", "LINE_COMMENT", "WHITESPACE"}
_DQ_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "v": "\v", "f": "\f", "\\": "\\", '"': '"', "$": "$", "0": "\0"}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int


@dataclass(frozen=True)
class Assignment:
    """A single ``$cfg[...] = value;`` statement."""

    path: tuple[Any, ...]
    value: Any
    line: int


@dataclass
class ParsedTemplate:
    """Result of parsing a configuration file.

    Attributes:
        tree: Nested dict rooted at ``$cfg`` (server indices are ints)
        assignments: Statements in file order
        source: Where the text came from (for error messages)
    """

    tree: dict[Any, Any] = field(default_factory=dict)
    assignments: list[Assignment] = field(default_factory=list)
    source: str | None = None


def tokenize(text: str, source: str | None = None) -> list[Token]:
    """Split text into tokens, dropping comments and whitespace."""
    tokens: list[Token] = []
    line = 1
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup or "MISMATCH"
        value = match.group()
        if kind == "MISMATCH":
            raise TemplateSyntaxError(f"Unexpected character {value!r}", line, source)
        if kind not in _SKIPPED:
            tokens.append(Token(kind, value, line))
        line += value.count("\n")
    return tokens


def _unquote_single(raw: str) -> str:
    body = raw[1:-1]
    return re.sub(r"\\([\\'])", r"\1", body)


def _unquote_double(raw: str) -> str:
    body = raw[1:-1]
    return re.sub(r"\\(.)", lambda m: _DQ_ESCAPES.get(m.group(1), m.group(0)), body, flags=re.DOTALL)


class _Parser:
    def __init__(self, tokens: list[Token], source: str | None):
        self.tokens = tokens
        self.source = source
        self.pos = 0
        self.variables: dict[str, Any] = {}
        self.result = ParsedTemplate(source=source)

    # Token helpers

    def peek(self, offset: int = 0) -> Token | None:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            last_line = self.tokens[-1].line if self.tokens else None
            raise TemplateSyntaxError("Unexpected end of file", last_line, self.source)
        self.pos += 1
        return token

    def expect(self, kind: str, text: str | None = None) -> Token:
        token = self.advance()
        if token.kind != kind or (text is not None and token.text != text):
            wanted = text if text is not None else kind.lower()
            raise TemplateSyntaxError(f"Expected {wanted!r}, found {token.text!r}", token.line, self.source)
        return token

    def at(self, kind: str, text: str | None = None) -> bool:
        token = self.peek()
        return token is not None and token.kind == kind and (text is None or token.text == text)

    def error(self, message: str, token: Token) -> TemplateSyntaxError:
        return TemplateSyntaxError(message, token.line, self.source)

    # Statements

    def parse(self) -> ParsedTemplate:
        while self.peek() is not None:
            token = self.advance()
            if token.kind in ("OPEN_TAG", "CLOSE_TAG"):
                continue
            if token.kind == "PUNCT" and token.text == ";":
                continue
            if token.kind == "INCREMENT":
                variable = self.expect("VARIABLE")
                self._step_counter(variable, token.text)
                self.expect("PUNCT", ";")
            elif token.kind == "VARIABLE":
                self._variable_statement(token)
            else:
                raise self.error(f"Unexpected {token.text!r} at start of statement", token)
        return self.result

    def _variable_statement(self, variable: Token) -> None:
        name = variable.text[1:]
        if self.at("INCREMENT"):
            operator = self.advance()
            self._step_counter(variable, operator.text)
            self.expect("PUNCT", ";")
            return

        if name == ROOT_VARIABLE:
            path = self._index_path(variable)
            self.expect("PUNCT", "=")
            value = self._value()
            self.expect("PUNCT", ";")
            self._assign(path, value, variable)
            return

        self.expect("PUNCT", "=")
        self.variables[name] = self._value()
        self.expect("PUNCT", ";")

    def _step_counter(self, variable: Token, operator: str) -> None:
        name = variable.text[1:]
        current = self.variables.get(name)
        if not isinstance(current, int) or isinstance(current, bool):
            raise self.error(f"Counter {variable.text} must be an integer before {operator}", variable)
        self.variables[name] = current + 1 if operator == "++" else current - 1

    def _index_path(self, root: Token) -> tuple[Any, ...]:
        path: list[Any] = []
        while self.at("PUNCT", "["):
            self.advance()
            path.append(self._index())
            self.expect("PUNCT", "]")
        if not path:
            raise self.error(f"Assignment to {root.text} needs at least one index", root)
        return tuple(path)

    def _index(self) -> Any:
        token = self.advance()
        if token.kind == "SQ_STRING":
            return _normalize_key(_unquote_single(token.text))
        if token.kind == "DQ_STRING":
            return _normalize_key(_unquote_double(token.text))
        if token.kind == "NUMBER" and "." not in token.text:
            return int(token.text)
        if token.kind == "VARIABLE":
            name = token.text[1:]
            if name not in self.variables:
                raise self.error(f"Undefined variable {token.text}", token)
            value = self.variables[name]
            if isinstance(value, str):
                return _normalize_key(value)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            raise self.error(f"Variable {token.text} cannot be used as an index", token)
        raise self.error(f"Invalid index {token.text!r}", token)

    def _assign(self, path: tuple[Any, ...], value: Any, token: Token) -> None:
        node = self.result.tree
        for depth, key in enumerate(path[:-1]):
            child = node.get(key)
            if child is None:
                child = node[key] = {}
            elif not isinstance(child, dict):
                prefix = "".join(f"[{k!r}]" for k in path[: depth + 1])
                raise self.error(f"Cannot index into scalar ${ROOT_VARIABLE}{prefix}", token)
            node = child
        node[path[-1]] = value
        self.result.assignments.append(Assignment(path, value, token.line))

    # Values

    def _value(self) -> Any:
        token = self.advance()
        if token.kind == "SQ_STRING":
            return _unquote_single(token.text)
        if token.kind == "DQ_STRING":
            return _unquote_double(token.text)
        if token.kind == "NUMBER":
            return float(token.text) if "." in token.text else int(token.text)
        if token.kind == "VARIABLE":
            name = token.text[1:]
            if name not in self.variables:
                raise self.error(f"Undefined variable {token.text}", token)
            return self.variables[name]
        if token.kind == "PUNCT" and token.text == "[":
            return self._array_items("]")
        if token.kind == "NAME":
            lowered = token.text.lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
            if lowered == "null":
                return None
            if lowered == "array":
                self.expect("PUNCT", "(")
                return self._array_items(")")
        raise self.error(f"Unsupported value {token.text!r}", token)

    def _array_items(self, closing: str) -> list[Any] | dict[Any, Any]:
        keyed = False
        items: list[tuple[Any, Any]] = []
        next_index = 0
        while not self.at("PUNCT", closing):
            first = self._value()
            if self.at("ARROW"):
                self.advance()
                keyed = True
                key = _normalize_key(first) if isinstance(first, str) else first
                items.append((key, self._value()))
                if isinstance(key, int):
                    next_index = max(next_index, key + 1)
            else:
                items.append((next_index, first))
                next_index += 1
            if not self.at("PUNCT", closing):
                self.expect("PUNCT", ",")
        self.advance()
        if keyed:
            return dict(items)
        return [value for _, value in items]


def _normalize_key(key: str) -> Any:
    """Integer-looking string keys are integers, as in PHP arrays."""
    if _INT_KEY_RE.match(key):
        return int(key)
    return key


def parse_template(text: str, source: str | None = None) -> ParsedTemplate:
    """
    Parse configuration file text.

    Args:
        text: File contents
        source: Name used in error messages (usually the file path)

    Returns:
        ParsedTemplate with the nested ``$cfg`` tree and ordered assignments

    Raises:
        TemplateSyntaxError: On any construct outside the supported subset
    """
    return _Parser(tokenize(text, source), source).parse()
