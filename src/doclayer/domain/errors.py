"""Configuration-load errors.

INVARIANT: Every error here is raised while the configuration is being
loaded, never while a request is being resolved.
"""

from __future__ import annotations


class DirectiveError(ValueError):
    """A directive occurrence that cannot be accepted.

    Attributes:
        directive: Name of the offending directive.
        source: Configuration file the occurrence came from, if known.
        line: 1-based line number within *source*, if known.
    """

    code = "DIRECTIVE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        directive: str,
        source: str | None = None,
        line: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.directive = directive
        self.source = source
        self.line = line

    @property
    def location(self) -> str | None:
        """``file:line`` for the occurrence, or None when unknown."""
        if self.source is None:
            return None
        if self.line is None:
            return self.source
        return f"{self.source}:{self.line}"


class ContextError(DirectiveError):
    """Directive declared inside a block where it is not allowed."""

    code = "CONTEXT_ERROR"

    def __init__(self, message: str, *, ancestor: str, **kwargs: object) -> None:
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
        self.ancestor = ancestor


class InvalidValueError(DirectiveError):
    """Directive given a value outside its recognised literals."""

    code = "INVALID_VALUE"

    def __init__(self, message: str, *, value: str, **kwargs: object) -> None:
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
        self.value = value


class DirectiveSyntaxError(DirectiveError):
    """Directive given the wrong number of arguments."""

    code = "DIRECTIVE_SYNTAX"


class ConfigSyntaxError(ValueError):
    """Malformed configuration text (block structure or quoting)."""

    code = "CONFIG_SYNTAX"

    def __init__(self, message: str, *, source: str | None = None, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.line = line
