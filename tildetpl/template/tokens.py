"""
Lexical types.

Defines token types produced by the scanner and the token record itself.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# Directive markers
OPEN_MARKER = "{~"
CLOSE_MARKER = "~}"
ESCAPE_CHAR = "\\"


class TokenType(enum.Enum):
    """Token types in a template."""

    # Literal content
    TEXT = "TEXT"
    # \{~ : literal marker, escape character dropped
    ESCAPED_MARKER = "ESCAPED_MARKER"

    # Directive boundaries
    DIRECTIVE_START = "DIRECTIVE_START"      # "{~ "
    DIRECTIVE_BODY = "DIRECTIVE_BODY"        # opaque content
    DIRECTIVE_END = "DIRECTIVE_END"          # " ~}"

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Token with positional information for precise error diagnostics.
    """
    type: TokenType
    value: str
    position: int        # Offset in the source text
    line: int            # 1-based line number
    column: int          # 1-based column number

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = [
    "OPEN_MARKER",
    "CLOSE_MARKER",
    "ESCAPE_CHAR",
    "TokenType",
    "Token",
]
