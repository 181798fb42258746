"""Configuration errors.

Every failure raised while loading a configuration derives from
ConfigurationError, so callers (and the CLI) can treat loading as
all-or-nothing with a single except clause.
"""


class ConfigurationError(ValueError):
    """Base class for all configuration loading failures."""


class MissingValue(ConfigurationError):
    """A required directive has no value after placeholder resolution.

    Attributes:
        name: Directive that could not be resolved (e.g. "blowfish_secret",
            "Servers[1].host"). Also the string form of the error.
        placeholder: Token that was left unresolved, if any (e.g. "BLOWFISH").
    """

    def __init__(self, name: str, placeholder: str | None = None):
        super().__init__(name)
        self.name = name
        self.placeholder = placeholder

    def __str__(self) -> str:
        return self.name

    def describe(self) -> str:
        """Human readable message for operators."""
        if self.placeholder:
            return f"Missing value for '{self.name}' (placeholder {{{self.placeholder}}} was not supplied)"
        return f"Missing value for '{self.name}'"


class InvalidValue(ConfigurationError):
    """A directive has a value outside of its allowed domain."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason

    def describe(self) -> str:
        return f"Invalid value for '{self.name}': {self.reason}"


class TemplateSyntaxError(ConfigurationError):
    """The template text is not a valid assignment file."""

    def __init__(self, message: str, line: int | None = None, source: str | None = None):
        location = ""
        if source and line:
            location = f"{source}:{line}: "
        elif line:
            location = f"line {line}: "
        super().__init__(f"{location}{message}")
        self.message = message
        self.line = line
        self.source = source

    def describe(self) -> str:
        return str(self)
