"""Tests for line classification in the lexer."""

import pytest

from merry.lexer import Lexer, tokenize
from merry.tokens import TokenType


def types(source: str) -> list[TokenType]:
    return [t.type for t in Lexer(source).tokenize()]


class TestHeadings:
    """Heading lines."""

    def test_heading_value_is_title(self) -> None:
        """The token value is the title without the hashes."""
        tokens = list(Lexer("# Hello").tokenize())
        assert tokens[0].type == TokenType.HEADING
        assert tokens[0].value == "Hello"
        assert tokens[0].level == 1

    def test_heading_level_counts_hashes(self) -> None:
        tokens = list(Lexer("#### Deep").tokenize())
        assert tokens[0].level == 4

    def test_levels_beyond_six(self) -> None:
        """There is no upper bound on heading levels."""
        tokens = list(Lexer("######## Eight").tokenize())
        assert tokens[0].type == TokenType.HEADING
        assert tokens[0].level == 8

    def test_hash_without_space_is_text(self) -> None:
        """#tag is text, not a heading."""
        assert types("#tag") == [TokenType.TEXT_LINE, TokenType.EOF]

    def test_lone_hash_is_empty_heading(self) -> None:
        tokens = list(Lexer("#").tokenize())
        assert tokens[0].type == TokenType.HEADING
        assert tokens[0].value == ""

    def test_trailing_whitespace_stripped(self) -> None:
        tokens = list(Lexer("## Title   ").tokenize())
        assert tokens[0].value == "Title"


class TestListMarkers:
    """List marker lines."""

    def test_marker_value_is_item_text(self) -> None:
        tokens = list(Lexer("-- item").tokenize())
        assert tokens[0].type == TokenType.LIST_MARKER
        assert tokens[0].value == "item"
        assert tokens[0].indent == 0

    def test_indented_marker(self) -> None:
        tokens = list(Lexer("   -- nested").tokenize())
        assert tokens[0].type == TokenType.LIST_MARKER
        assert tokens[0].indent == 3

    def test_tab_expands_to_four_columns(self) -> None:
        tokens = list(Lexer("\t-- x").tokenize())
        assert tokens[0].indent == 4

    def test_double_dash_word_is_text(self) -> None:
        """--flag has no space after the marker."""
        assert types("--flag") == [TokenType.TEXT_LINE, TokenType.EOF]

    def test_bare_marker(self) -> None:
        tokens = list(Lexer("--").tokenize())
        assert tokens[0].type == TokenType.LIST_MARKER
        assert tokens[0].value == ""


class TestDirectives:
    """Directive lines."""

    def test_directive_value_is_text_after_bar(self) -> None:
        tokens = list(Lexer("| href w https://w.org").tokenize())
        assert tokens[0].type == TokenType.DIRECTIVE
        assert tokens[0].value == "href w https://w.org"

    def test_bar_alone(self) -> None:
        tokens = list(Lexer("|").tokenize())
        assert tokens[0].type == TokenType.DIRECTIVE
        assert tokens[0].value == ""


class TestSectionReturns:
    """Backtick runs that are not fences."""

    @pytest.mark.parametrize(("source", "level"), [("`", 1), ("``", 2), ("````", 4)])
    def test_level_is_backtick_count(self, source: str, level: int) -> None:
        tokens = list(Lexer(source).tokenize())
        assert tokens[0].type == TokenType.SECTION_RETURN
        assert tokens[0].level == level

    def test_inline_verbatim_line_is_text(self) -> None:
        """A line starting with an inline verbatim is ordinary text."""
        assert types("`code` here") == [TokenType.TEXT_LINE, TokenType.EOF]


class TestBlankLinesAndText:
    """Blank and text lines."""

    def test_blank_line(self) -> None:
        assert types("a\n\nb") == [
            TokenType.TEXT_LINE,
            TokenType.BLANK_LINE,
            TokenType.TEXT_LINE,
            TokenType.EOF,
        ]

    def test_whitespace_only_line_is_blank(self) -> None:
        assert types("a\n   \nb")[1] == TokenType.BLANK_LINE

    def test_text_keeps_indent(self) -> None:
        tokens = list(Lexer("  text").tokenize())
        assert tokens[0].value == "text"
        assert tokens[0].indent == 2

    def test_empty_source(self) -> None:
        assert types("") == [TokenType.EOF]

    def test_one_token_per_line(self) -> None:
        """Every physical line yields exactly one token."""
        source = "# A\ntext\n-- item\n| href a b\n\n``\n"
        tokens = list(Lexer(source).tokenize())
        assert [t.lineno for t in tokens[:-1]] == [1, 2, 3, 4, 5, 6]

    def test_tokenize_normalizes_newlines(self) -> None:
        tokens = list(tokenize("a\r\nb\rc"))
        assert [t.value for t in tokens[:-1]] == ["a", "b", "c"]
