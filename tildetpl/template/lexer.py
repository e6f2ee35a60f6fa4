"""
Scanner for the template engine.

Splits raw template text into literal runs, escaped markers and directive
spans. Directive content is handed to the parser as a single opaque token;
malformed markers degrade to literal text instead of failing here.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import List, Tuple

from .tokens import CLOSE_MARKER, ESCAPE_CHAR, OPEN_MARKER, Token, TokenType

_OPEN = OPEN_MARKER + " "
_CLOSE = " " + CLOSE_MARKER


class TemplateLexer:
    """
    Single left-to-right scanner.

    A directive is "{~ " ... " ~}". A backslash directly before "{~" turns
    the marker into literal text. An open marker without exactly one
    separating space on each side of the content, or without a closing
    marker later in the text, is literal text.
    """

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)
        # Offsets of line starts, for line/column lookups
        self._line_starts: List[int] = [0]
        for idx, ch in enumerate(text):
            if ch == "\n":
                self._line_starts.append(idx + 1)

    def tokenize(self) -> List[Token]:
        """
        Tokenizes the whole text. The result always ends with an EOF token.
        """
        tokens: List[Token] = []
        text = self.text
        pos = 0      # start of the pending literal run
        scan = 0     # where to look for the next marker

        while True:
            idx = text.find(OPEN_MARKER, scan)
            if idx < 0:
                break

            # Escaped marker
            if idx > pos and text[idx - 1] == ESCAPE_CHAR:
                self._emit_text(tokens, pos, idx - 1)
                tokens.append(self._make(TokenType.ESCAPED_MARKER, OPEN_MARKER, idx - 1))
                pos = scan = idx + len(OPEN_MARKER)
                continue

            span = self._directive_span(idx)
            if span is None:
                # Not a directive, keep it in the literal run
                scan = idx + len(OPEN_MARKER)
                continue

            body_start, body_end = span
            self._emit_text(tokens, pos, idx)
            tokens.append(self._make(TokenType.DIRECTIVE_START, _OPEN, idx))
            tokens.append(self._make(TokenType.DIRECTIVE_BODY, text[body_start:body_end], body_start))
            tokens.append(self._make(TokenType.DIRECTIVE_END, _CLOSE, body_end))
            pos = scan = body_end + len(_CLOSE)

        self._emit_text(tokens, pos, self.length)
        tokens.append(self._make(TokenType.EOF, "", self.length))
        return tokens

    def _directive_span(self, idx: int) -> Tuple[int, int] | None:
        """
        Returns (body_start, body_end) for a directive opening at idx,
        or None if the marker is not a well-formed directive opening.
        """
        if not self.text.startswith(_OPEN, idx):
            return None
        body_start = idx + len(_OPEN)
        # The close marker needs its own space, distinct from the opening one
        body_end = self.text.find(_CLOSE, body_start)
        if body_end < 0:
            return None
        # Exactly one space on each side of the content
        if body_end > body_start and (
            self.text[body_start].isspace() or self.text[body_end - 1].isspace()
        ):
            return None
        return body_start, body_end

    def _emit_text(self, tokens: List[Token], start: int, end: int) -> None:
        if end > start:
            tokens.append(self._make(TokenType.TEXT, self.text[start:end], start))

    def _make(self, token_type: TokenType, value: str, position: int) -> Token:
        line, column = self.line_col(position)
        return Token(token_type, value, position, line, column)

    def line_col(self, position: int) -> Tuple[int, int]:
        """Converts an offset into a 1-based (line, column) pair."""
        line_idx = bisect_right(self._line_starts, position) - 1
        return line_idx + 1, position - self._line_starts[line_idx] + 1


def tokenize_template(text: str) -> List[Token]:
    """
    Convenience wrapper for tokenizing a template.

    Args:
        text: Template source text

    Returns:
        List of tokens ending with EOF
    """
    return TemplateLexer(text).tokenize()


__all__ = ["TemplateLexer", "tokenize_template"]
