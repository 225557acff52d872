"""Tests for the section-tree builder: heading nesting and section returns."""

import pytest

from merry import parse
from merry.errors import StructuralError
from merry.nodes import Paragraph, Section, Text, Verbatim


def sections(node: Section) -> list[Section]:
    return [child for child in node.children if isinstance(child, Section)]


def title(section: Section) -> str:
    return "".join(node.content for node in section.title if isinstance(node, Text))


class TestHeadingTransitions:
    """A heading may go one level deeper, stay, or go back up."""

    def test_child_and_sibling(self) -> None:
        doc = parse("# A\n## B\n# C")
        top = sections(doc.root)
        assert [title(s) for s in top] == ["A", "C"]
        assert [title(s) for s in sections(top[0])] == ["B"]

    def test_jump_back_several_levels(self) -> None:
        doc = parse("# A\n## B\n### C\n# D")
        assert [title(s) for s in sections(doc.root)] == ["A", "D"]

    def test_same_level_siblings(self) -> None:
        doc = parse("# A\n## B\n## C")
        assert [title(s) for s in sections(sections(doc.root)[0])] == ["B", "C"]

    def test_skipped_level_is_an_error(self) -> None:
        with pytest.raises(StructuralError, match="skipped nesting level") as exc_info:
            parse("# A\n### C")
        assert exc_info.value.location is not None
        assert exc_info.value.location.lineno == 2

    def test_document_cannot_start_at_level_two(self) -> None:
        with pytest.raises(StructuralError, match="document root"):
            parse("## A")

    def test_empty_heading_is_an_error(self) -> None:
        with pytest.raises(StructuralError, match="no title"):
            parse("# A\n#")

    def test_content_attaches_to_innermost_section(self) -> None:
        doc = parse("intro\n# A\nbody")
        assert isinstance(doc.root.children[0], Paragraph)
        a = sections(doc.root)[0]
        assert isinstance(a.children[0], Paragraph)

    def test_heading_title_is_inline_parsed(self) -> None:
        doc = parse("# A *bold* title")
        a = sections(doc.root)[0]
        assert len(a.title) == 3


class TestOutline:
    """Outline indices and parent links."""

    def test_indices_in_opening_order(self) -> None:
        doc = parse("# A\n## B\n# C")
        a, c = sections(doc.root)
        b = sections(a)[0]
        assert (a.index, b.index, c.index) == (1, 2, 3)
        assert len(doc.outline) == 4

    def test_parent_links(self) -> None:
        doc = parse("# A\n## B")
        a = sections(doc.root)[0]
        b = sections(a)[0]
        assert b.parent == a.index
        assert a.parent == 0
        assert doc.outline[b.index].parent == a.index

    def test_ancestors(self) -> None:
        doc = parse("# A\n## B\n### C")
        assert doc.ancestors(3) == [3, 2, 1, 0]


class TestSectionReturn:
    """N backticks reopen the enclosing level-N section."""

    def test_return_resumes_parent(self) -> None:
        doc = parse("# A\n## B\ntext b\n`\ntext a")
        a = sections(doc.root)[0]
        assert isinstance(a.children[0], Section)
        assert isinstance(a.children[1], Paragraph)
        assert a.children[1].children[0].content == "text a"
        assert a.reentered

    def test_return_creates_no_node(self) -> None:
        doc = parse("# A\n## B\n`\n")
        a = sections(doc.root)[0]
        assert len(a.children) == 1
        assert len(doc.outline) == 3

    def test_return_to_current_level_is_a_no_op(self) -> None:
        doc = parse("# A\nx\n`\ny")
        a = sections(doc.root)[0]
        assert not a.reentered
        assert len(a.children) == 2

    def test_return_several_levels(self) -> None:
        doc = parse("# A\n## B\n### C\n`\nback in a")
        a = sections(doc.root)[0]
        assert a.reentered
        assert not sections(a)[0].reentered
        assert doc.outline[a.index].reentered

    def test_return_without_open_level_is_an_error(self) -> None:
        with pytest.raises(StructuralError, match="no level-2 section is open"):
            parse("# A\n``")

    def test_return_at_root_is_an_error(self) -> None:
        with pytest.raises(StructuralError):
            parse("text\n`")

    def test_heading_after_return(self) -> None:
        doc = parse("# A\n## B\n`\n## C")
        a = sections(doc.root)[0]
        assert [title(s) for s in sections(a)] == ["B", "C"]

    def test_three_backticks_open_verbatim_instead_of_returning(self) -> None:
        """A bare three-backtick line is a fence, never a return to level 3."""
        doc = parse("# A\n## B\n### C\n#### D\n```\nx\n```")
        a = sections(doc.root)[0]
        c = sections(sections(a)[0])[0]
        d = sections(c)[0]
        assert isinstance(d.children[0], Verbatim)
        assert d.children[0].content == "x"
        assert not c.reentered

    def test_four_backticks_return_to_level_four(self) -> None:
        doc = parse("# A\n## B\n### C\n#### D\n##### E\n````\nback in d")
        d = sections(sections(sections(sections(doc.root)[0])[0])[0])[0]
        assert d.reentered
        assert isinstance(d.children[-1], Paragraph)
