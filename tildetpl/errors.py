"""
Exceptions raised by the templating engine.

All expected errors derive from TemplateError so that callers can
report them as clean messages. Parse-time errors abort the whole parse,
render-time errors abort a single render call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


class TemplateError(Exception):
    """
    Base class for all user-facing template errors.

    These errors indicate problems in the template source, in the
    included files or in the bindings supplied by the caller.
    """
    pass


# ---------------------------------------------------------------- parsing

@dataclass
class ParseError(TemplateError):
    """Base class for errors that abort parsing."""
    line: Optional[int] = field(default=None, kw_only=True)
    column: Optional[int] = field(default=None, kw_only=True)
    source: Optional[str] = field(default=None, kw_only=True)

    def _where(self) -> str:
        parts = []
        if self.source:
            parts.append(self.source)
        if self.line is not None:
            parts.append(f"{self.line}:{self.column}")
        return f" at {':'.join(parts)}" if parts else ""


@dataclass
class UnterminatedPatternError(ParseError):
    """Pattern opened but never closed."""
    name: str

    def __str__(self) -> str:
        return f"Pattern '{self.name}' is never closed with @end-pattern{self._where()}"


@dataclass
class DanglingEndPatternError(ParseError):
    """@end-pattern without an open pattern."""

    def __str__(self) -> str:
        return f"@end-pattern without a matching @pattern{self._where()}"


@dataclass
class DuplicatePatternError(ParseError):
    """Pattern name registered twice in one document."""
    name: str

    def __str__(self) -> str:
        return f"Pattern '{self.name}' is already defined{self._where()}"


@dataclass
class NestedPatternError(ParseError):
    """Pattern defined inside another pattern's body."""
    name: str
    enclosing: str

    def __str__(self) -> str:
        return (
            f"Pattern '{self.name}' cannot be defined inside pattern "
            f"'{self.enclosing}'{self._where()}"
        )


@dataclass
class InvalidIdentifierError(ParseError):
    """Empty or malformed variable/pattern name."""
    identifier: str

    def __str__(self) -> str:
        return f"Invalid identifier {self.identifier!r}{self._where()}"


@dataclass
class UnknownDirectiveError(ParseError):
    """Directive content not recognized by the grammar."""
    directive: str

    def __str__(self) -> str:
        return f"Unknown directive {self.directive!r}{self._where()}"


@dataclass
class MalformedIncludeError(ParseError):
    """@include without a separating space or a path."""
    directive: str

    def __str__(self) -> str:
        return f"Malformed include directive {self.directive!r}{self._where()}"


# --------------------------------------------------------------- includes

@dataclass
class IncludeError(ParseError):
    """Base class for include resolution failures."""
    pass


@dataclass
class MissingRequiredIncludeError(IncludeError):
    """Required include could not be found."""
    path: str
    chain: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        via = f" (included from {' -> '.join(self.chain)})" if self.chain else ""
        return f"Required include '{self.path}' not found{via}{self._where()}"


@dataclass
class CircularIncludeError(IncludeError):
    """Include whose path is already being resolved."""
    chain: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Circular include: {' -> '.join(self.chain)}"


@dataclass
class IncludeReadError(IncludeError):
    """Read capability failed for a reason other than not-found."""
    path: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        return f"Failed to read include '{self.path}': {self.cause}{self._where()}"


# -------------------------------------------------------------- rendering

class RenderError(TemplateError):
    """Base class for errors that abort rendering."""
    pass


@dataclass
class MissingRequiredValueError(RenderError):
    """Required variable has no binding."""
    name: str

    def __str__(self) -> str:
        return f"Missing value for required variable '{self.name}'"


# ---------------------------------------------------------------- lookups

class TemplateLookupError(TemplateError, LookupError):
    """Base class for lookups of unknown names on a document."""
    pass


@dataclass
class UnknownPatternError(TemplateLookupError):
    """Pattern name was never registered."""
    name: str
    available: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        avail = f". Available: {', '.join(self.available)}" if self.available else ""
        return f"Unknown pattern '{self.name}'{avail}"


@dataclass
class UnknownSlotError(TemplateLookupError):
    """No pattern slot with this name exists in the document."""
    name: str

    def __str__(self) -> str:
        return f"No pattern slot named '{self.name}'"


__all__ = [
    "TemplateError",
    "ParseError",
    "UnterminatedPatternError",
    "DanglingEndPatternError",
    "DuplicatePatternError",
    "NestedPatternError",
    "InvalidIdentifierError",
    "UnknownDirectiveError",
    "MalformedIncludeError",
    "IncludeError",
    "MissingRequiredIncludeError",
    "CircularIncludeError",
    "IncludeReadError",
    "RenderError",
    "MissingRequiredValueError",
    "TemplateLookupError",
    "UnknownPatternError",
    "UnknownSlotError",
]
