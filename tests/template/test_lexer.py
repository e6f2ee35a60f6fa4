"""
Tests for the template scanner.

Checks classification of literal runs, escaped markers and directive
spans, plus degradation of malformed markers to literal text.
"""

from tildetpl.template.lexer import TemplateLexer, tokenize_template
from tildetpl.template.tokens import TokenType


def _types(tokens):
    return [t.type for t in tokens]


class TestTemplateLexer:
    """Basic scanner behavior."""

    def test_empty_template(self):
        """Empty text yields only EOF."""
        tokens = tokenize_template("")

        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].position == 0
        assert tokens[0].line == 1
        assert tokens[0].column == 1

    def test_plain_text(self):
        """Text without markers is a single TEXT token."""
        tokens = tokenize_template("Hello, world!")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "Hello, world!"

    def test_simple_directive(self):
        """A well-formed directive yields START, BODY, END."""
        tokens = tokenize_template("{~ $x ~}")

        assert _types(tokens) == [
            TokenType.DIRECTIVE_START,
            TokenType.DIRECTIVE_BODY,
            TokenType.DIRECTIVE_END,
            TokenType.EOF,
        ]
        assert tokens[1].value == "$x"

    def test_directive_between_text(self):
        tokens = tokenize_template("a {~ $x ~} b")

        assert _types(tokens) == [
            TokenType.TEXT,
            TokenType.DIRECTIVE_START,
            TokenType.DIRECTIVE_BODY,
            TokenType.DIRECTIVE_END,
            TokenType.TEXT,
            TokenType.EOF,
        ]
        assert tokens[0].value == "a "
        assert tokens[4].value == " b"

    def test_body_is_opaque(self):
        """Directive content is passed through untouched, including inner spaces."""
        tokens = tokenize_template("{~ @include some dir/a b.txt ~}")

        assert tokens[1].value == "@include some dir/a b.txt"


class TestMalformedMarkers:
    """Markers without the separating spaces are literal text."""

    def test_missing_spaces(self):
        tokens = tokenize_template("{~$x~}")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "{~$x~}"

    def test_missing_space_before_close(self):
        tokens = tokenize_template("{~ $x~}")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]

    def test_unclosed_directive(self):
        """An open marker with no close marker later on is literal text."""
        tokens = tokenize_template("start {~ $x and more")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "start {~ $x and more"

    def test_two_spaces_after_open(self):
        tokens = tokenize_template("{~  $x ~}")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "{~  $x ~}"

    def test_two_spaces_before_close(self):
        tokens = tokenize_template("{~ $x  ~}")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]

    def test_other_whitespace_around_content(self):
        """Tabs and newlines do not count as the separating space."""
        tokens = tokenize_template("{~ \t$x ~} {~ $y\n ~}")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]

    def test_padded_marker_then_directive(self):
        tokens = tokenize_template("{~  $x ~}{~ $y ~}")

        assert _types(tokens) == [
            TokenType.TEXT,
            TokenType.DIRECTIVE_START,
            TokenType.DIRECTIVE_BODY,
            TokenType.DIRECTIVE_END,
            TokenType.EOF,
        ]
        assert tokens[0].value == "{~  $x ~}"
        assert tokens[2].value == "$y"

    def test_open_and_close_cannot_share_space(self):
        """'{~ ~}' is not an empty directive."""
        tokens = tokenize_template("{~ ~}")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]

    def test_empty_directive_body(self):
        tokens = tokenize_template("{~  ~}")

        assert _types(tokens)[:3] == [
            TokenType.DIRECTIVE_START,
            TokenType.DIRECTIVE_BODY,
            TokenType.DIRECTIVE_END,
        ]
        assert tokens[1].value == ""

    def test_literal_marker_then_directive(self):
        """A malformed marker does not swallow a later valid directive."""
        tokens = tokenize_template("{~x {~ $y ~}")

        assert _types(tokens) == [
            TokenType.TEXT,
            TokenType.DIRECTIVE_START,
            TokenType.DIRECTIVE_BODY,
            TokenType.DIRECTIVE_END,
            TokenType.EOF,
        ]
        assert tokens[0].value == "{~x "
        assert tokens[2].value == "$y"


class TestEscapes:
    """Backslash before the open marker."""

    def test_escaped_marker(self):
        tokens = tokenize_template("\\{~ $x ~}")

        assert _types(tokens) == [TokenType.ESCAPED_MARKER, TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "{~"
        assert tokens[1].value == " $x ~}"

    def test_escape_in_text(self):
        tokens = tokenize_template("a \\{~ b")

        assert _types(tokens) == [
            TokenType.TEXT, TokenType.ESCAPED_MARKER, TokenType.TEXT, TokenType.EOF
        ]
        assert tokens[0].value == "a "
        assert tokens[2].value == " b"

    def test_backslash_elsewhere_is_kept(self):
        """Only the opening marker can be escaped."""
        tokens = tokenize_template("path\\to \\{ x ~\\}")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "path\\to \\{ x ~\\}"

    def test_escaped_then_real_directive(self):
        tokens = tokenize_template("\\{~ {~ $x ~}")

        assert _types(tokens) == [
            TokenType.ESCAPED_MARKER,
            TokenType.TEXT,
            TokenType.DIRECTIVE_START,
            TokenType.DIRECTIVE_BODY,
            TokenType.DIRECTIVE_END,
            TokenType.EOF,
        ]


class TestPositions:
    """Line/column tracking."""

    def test_multiline_positions(self):
        tokens = tokenize_template("line 1\nline 2 {~ $x ~}\n")

        body = tokens[2]
        assert body.type == TokenType.DIRECTIVE_BODY
        assert body.line == 2
        assert body.column == 11

    def test_line_col(self):
        lexer = TemplateLexer("ab\ncd\n")

        assert lexer.line_col(0) == (1, 1)
        assert lexer.line_col(3) == (2, 1)
        assert lexer.line_col(4) == (2, 2)
        assert lexer.line_col(6) == (3, 1)
