"""Tests for list parsing: content columns, nesting and blank lines."""

import pytest

from merry import parse
from merry.errors import StructuralError
from merry.nodes import List, Paragraph, Text, Verbatim


def paragraph_text(paragraph: Paragraph) -> str:
    return "".join(node.content for node in paragraph.children if isinstance(node, Text))


class TestContentColumn:
    """Lines attach to an item only at its content column."""

    def test_aligned_lines_attach(self) -> None:
        doc = parse("-- Is\n   This\n   It\n")
        assert len(doc.root.children) == 1
        lst = doc.root.children[0]
        assert isinstance(lst, List)
        assert len(lst.items) == 1
        assert paragraph_text(lst.items[0].children[0]) == "Is This It"

    def test_unindented_lines_do_not_attach(self) -> None:
        doc = parse("-- Is\nThis\nIt\n")
        lst, paragraph = doc.root.children
        assert isinstance(lst, List)
        assert paragraph_text(lst.items[0].children[0]) == "Is"
        assert isinstance(paragraph, Paragraph)
        assert paragraph_text(paragraph) == "This It"

    def test_two_columns_is_not_enough(self) -> None:
        doc = parse("-- Is\n  This")
        lst, paragraph = doc.root.children
        assert len(lst.items[0].children) == 1
        assert paragraph_text(paragraph) == "This"

    def test_nested_marker_column(self) -> None:
        doc = parse("   -- a\n      b")
        lst = doc.root.children[0]
        assert paragraph_text(lst.items[0].children[0]) == "a b"


class TestItems:
    """Item sequencing and nesting."""

    def test_consecutive_items(self) -> None:
        lst = parse("-- one\n-- two").root.children[0]
        assert len(lst.items) == 2

    def test_one_blank_line_keeps_list_open(self) -> None:
        children = parse("-- one\n\n-- two").root.children
        assert len(children) == 1
        assert len(children[0].items) == 2

    def test_two_blank_lines_close_list(self) -> None:
        children = parse("-- one\n\n\n-- two").root.children
        assert len(children) == 2
        assert all(isinstance(child, List) for child in children)

    def test_nested_list(self) -> None:
        lst = parse("-- one\n   -- sub\n-- two").root.children[0]
        assert len(lst.items) == 2
        first = lst.items[0]
        assert isinstance(first.children[1], List)
        assert paragraph_text(first.children[1].items[0].children[0]) == "sub"

    def test_item_holds_verbatim(self) -> None:
        lst = parse("-- code:\n   ```\n   x\n   ```").root.children[0]
        verbatim = lst.items[0].children[1]
        assert isinstance(verbatim, Verbatim)
        assert verbatim.content == "x"

    def test_item_holds_second_paragraph(self) -> None:
        lst = parse("-- a\n\n   b").root.children[0]
        assert [paragraph_text(p) for p in lst.items[0].children] == ["a", "b"]

    def test_empty_marker(self) -> None:
        lst = parse("--\n-- b").root.children[0]
        assert lst.items[0].children == ()

    def test_heading_inside_item_is_an_error(self) -> None:
        with pytest.raises(StructuralError, match="inside list item"):
            parse("-- item\n   # Title")

    def test_heading_at_margin_ends_list(self) -> None:
        doc = parse("-- item\n# Title")
        assert isinstance(doc.root.children[0], List)
