"""Tests for source location tracking in the lexer."""

from merry.lexer import Lexer
from merry.tokens import TokenType


class TestLineLocations:
    """Line, column and offset tracking."""

    def test_heading_spans_the_whole_line(self) -> None:
        token = next(Lexer("# Heading").tokenize())
        loc = token.location
        assert (loc.lineno, loc.col_offset) == (1, 1)
        assert (loc.offset, loc.end_offset) == (0, 9)
        assert loc.end_col_offset == 10

    def test_indented_line_starts_at_content(self) -> None:
        tokens = list(Lexer("a\n  b").tokenize())
        loc = tokens[1].location
        assert loc.lineno == 2
        assert loc.col_offset == 3
        assert loc.offset == 4

    def test_value_is_suffix_of_located_text(self) -> None:
        """The payload ends where the located text ends."""
        source = "## Title\n-- item\n| name arg"
        for token in Lexer(source).tokenize():
            if token.type == TokenType.EOF:
                continue
            located = source[token.location.offset : token.location.end_offset]
            assert located.endswith(token.value)

    def test_eof_location(self) -> None:
        tokens = list(Lexer("a\nb").tokenize())
        eof = tokens[-1]
        assert eof.type == TokenType.EOF
        assert (eof.location.lineno, eof.location.col_offset) == (2, 2)

    def test_source_file_propagates(self) -> None:
        token = next(Lexer("x", source_file="doc.md2").tokenize())
        assert token.location.source_file == "doc.md2"
        assert str(token.location) == "doc.md2:1:1"

    def test_verbatim_line_spans_raw_line(self) -> None:
        tokens = list(Lexer("```\n  raw  \n```").tokenize())
        loc = tokens[1].location
        assert (loc.offset, loc.end_offset) == (4, 11)
