"""
Directive parser for the template engine.

Turns the scanner's token stream into a node sequence. Validates the
grammar of every directive span and groups pattern bodies. Include
directives are left as IncludeNode for the resolver.

Grammar of a directive body (the scanner guarantees no surrounding whitespace):

    $name  $name!  $name?            variable
    @include path  @include? path    include (required / optional)
    @pattern name[!|?]               opens a pattern block
    @end-pattern                     closes it
    @pattern-slot name               extra insertion point for a pattern
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .lexer import tokenize_template
from .nodes import (
    IncludeNode,
    PatternNode,
    PatternSlotNode,
    Requirement,
    TemplateBody,
    TemplateNode,
    TextNode,
    VariableNode,
)
from .tokens import OPEN_MARKER, Token, TokenType
from ..errors import (
    DanglingEndPatternError,
    InvalidIdentifierError,
    MalformedIncludeError,
    NestedPatternError,
    UnknownDirectiveError,
    UnterminatedPatternError,
)

# Letters, digits and underscore, not starting with a digit
_IDENTIFIER = re.compile(r"(?!\d)\w+")
_KEYWORD = re.compile(r"@([A-Za-z][A-Za-z-]*)(\?)?")

_INCLUDE = "include"
_PATTERN = "pattern"
_END_PATTERN = "end-pattern"
_PATTERN_SLOT = "pattern-slot"


def is_identifier(name: str) -> bool:
    """Checks that a name is a valid variable/pattern identifier."""
    return _IDENTIFIER.fullmatch(name) is not None


@dataclass
class _OpenPattern:
    """Pattern block currently collecting its body."""
    name: str
    required: bool
    token: Token
    body: List[TemplateNode] = field(default_factory=list)


class TemplateParser:
    """
    Parser over a scanner token list.

    Patterns cannot nest, so a single "current pattern" slot is enough to
    know where a node belongs: either the document body or the body of
    the open pattern.
    """

    def __init__(self, tokens: List[Token], source: Optional[str] = None):
        self.tokens = tokens
        self.position = 0
        self.source = source

        self._body: List[TemplateNode] = []
        self._open: Optional[_OpenPattern] = None

    def parse(self) -> TemplateBody:
        """
        Parses the whole token sequence.

        Returns:
            Top-level nodes; pattern blocks appear as PatternNode

        Raises:
            ParseError: On any grammar violation
        """
        while not self._is_at_end():
            token = self._current_token()

            if token.type == TokenType.TEXT:
                self._append_text(self._advance().value)
            elif token.type == TokenType.ESCAPED_MARKER:
                self._advance()
                self._append_text(OPEN_MARKER)
            elif token.type == TokenType.DIRECTIVE_START:
                self._parse_directive()
            else:
                raise UnknownDirectiveError(
                    directive=token.value, **self._location(token)
                )

        if self._open is not None:
            raise UnterminatedPatternError(
                name=self._open.name, **self._location(self._open.token)
            )

        return tuple(self._body)

    # ------------------------------------------------------------ directives

    def _parse_directive(self) -> None:
        self._consume(TokenType.DIRECTIVE_START)
        body_token = self._consume(TokenType.DIRECTIVE_BODY)
        self._consume(TokenType.DIRECTIVE_END)

        content = body_token.value
        if content.startswith("$"):
            self._append(self._parse_variable(content, body_token))
        elif content.startswith("@"):
            self._parse_command(content, body_token)
        else:
            raise UnknownDirectiveError(directive=content, **self._location(body_token))

    def _parse_variable(self, content: str, token: Token) -> VariableNode:
        name = content[1:]
        requirement = Requirement.OPTIONAL
        explicit = False

        if name.endswith("!"):
            name, requirement, explicit = name[:-1], Requirement.REQUIRED, True
        elif name.endswith("?"):
            name, explicit = name[:-1], True

        if not is_identifier(name):
            raise InvalidIdentifierError(identifier=name, **self._location(token))

        return VariableNode(name=name, requirement=requirement, explicit=explicit)

    def _parse_command(self, content: str, token: Token) -> None:
        match = _KEYWORD.match(content)
        if match is None:
            raise UnknownDirectiveError(directive=content, **self._location(token))

        keyword, question = match.group(1), match.group(2)
        rest = content[match.end():]

        if keyword == _INCLUDE:
            self._append(self._parse_include(content, rest, bool(question), token))
            return

        # '?' right after the keyword only means something for includes
        if question:
            raise UnknownDirectiveError(directive=content, **self._location(token))

        if keyword == _PATTERN:
            self._open_pattern(rest, token)
        elif keyword == _END_PATTERN:
            if rest:
                raise UnknownDirectiveError(directive=content, **self._location(token))
            self._close_pattern(token)
        elif keyword == _PATTERN_SLOT:
            name = self._parse_argument(rest, token)
            if not is_identifier(name):
                raise InvalidIdentifierError(identifier=name, **self._location(token))
            self._append(PatternSlotNode(name=name))
        else:
            raise UnknownDirectiveError(directive=content, **self._location(token))

    def _parse_include(self, content: str, rest: str, optional: bool, token: Token) -> IncludeNode:
        # Exactly one space separates the keyword from the path
        if not rest.startswith(" ") or not rest[1:2].strip():
            raise MalformedIncludeError(directive=content, **self._location(token))

        return IncludeNode(
            path=rest[1:],
            optional=optional,
            line=token.line,
            column=token.column,
        )

    def _open_pattern(self, rest: str, token: Token) -> None:
        name = self._parse_argument(rest, token)
        required = False
        if name.endswith("!"):
            name, required = name[:-1], True
        elif name.endswith("?"):
            name = name[:-1]

        if not is_identifier(name):
            raise InvalidIdentifierError(identifier=name, **self._location(token))

        if self._open is not None:
            raise NestedPatternError(
                name=name, enclosing=self._open.name, **self._location(token)
            )

        self._open = _OpenPattern(name=name, required=required, token=token)

    def _close_pattern(self, token: Token) -> None:
        if self._open is None:
            raise DanglingEndPatternError(**self._location(token))

        opened = self._open
        self._open = None
        self._body.append(PatternNode(
            name=opened.name,
            body=tuple(opened.body),
            required=opened.required,
            line=opened.token.line,
            column=opened.token.column,
            source=self.source,
        ))

    def _parse_argument(self, rest: str, token: Token) -> str:
        """Returns the single argument following a keyword."""
        if not rest.startswith(" "):
            # "@pattern" with nothing after it, or "@patternx"
            raise InvalidIdentifierError(identifier=rest, **self._location(token))
        return rest[1:]

    # --------------------------------------------------------------- helpers

    def _append(self, node: TemplateNode) -> None:
        target = self._open.body if self._open is not None else self._body
        target.append(node)

    def _append_text(self, text: str) -> None:
        """Appends literal text, merging with a preceding literal."""
        target = self._open.body if self._open is not None else self._body
        if target and isinstance(target[-1], TextNode):
            target[-1] = TextNode(text=target[-1].text + text)
        else:
            target.append(TextNode(text=text))

    def _location(self, token: Token) -> dict:
        return {"line": token.line, "column": token.column, "source": self.source}

    def _current_token(self) -> Token:
        return self.tokens[self.position]

    def _advance(self) -> Token:
        token = self.tokens[self.position]
        if token.type != TokenType.EOF:
            self.position += 1
        return token

    def _consume(self, expected: TokenType) -> Token:
        token = self._current_token()
        if token.type != expected:
            raise UnknownDirectiveError(directive=token.value, **self._location(token))
        return self._advance()

    def _is_at_end(self) -> bool:
        return self._current_token().type == TokenType.EOF


def parse_template(text: str, source: Optional[str] = None) -> TemplateBody:
    """
    Scans and parses template text.

    Args:
        text: Template source text
        source: Name used in error messages (usually the file path)

    Returns:
        Node sequence with unresolved includes
    """
    tokens = tokenize_template(text)
    return TemplateParser(tokens, source=source).parse()


__all__ = ["TemplateParser", "parse_template", "is_identifier"]
