"""Core block parsing for merry.

Provides block dispatch and the basic blocks: paragraphs, verbatim blocks,
headings and section returns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from merry.errors import StructuralError
from merry.nodes import Block, Paragraph, Verbatim
from merry.parsing.inline.source_map import SourceMap
from merry.tokens import Token, TokenType

if TYPE_CHECKING:
    from merry.nodes import Inline, List
    from merry.parsing.sections import SectionStack


class BlockParsingCoreMixin:
    """Core block parsing methods.

    Required Host Attributes:
        - _current: Token | None
        - _sections: SectionStack
        - _source_file: str | None

    Required Host Methods:
        - _at_end() -> bool
        - _advance() -> Token | None
        - _parse_inline(source_map) -> tuple[Inline, ...]
        - _parse_list(marker_indent) -> List
        - _parse_directive() -> Directive

    """

    _current: Token | None
    _sections: SectionStack
    _source_file: str | None

    def _parse_block(self, min_indent: int = 0) -> Block | None:
        """Parse one block starting at the current token.

        Args:
            min_indent: Content column of the enclosing list item (0 at top level).
                Paragraph lines indented less than this end the paragraph.
        """
        token = self._current
        assert token is not None

        match token.type:
            case TokenType.TEXT_LINE:
                return self._parse_paragraph(min_indent)
            case TokenType.LIST_MARKER:
                return self._parse_list(token.indent)
            case TokenType.FENCE_OPEN:
                return self._parse_verbatim()
            case TokenType.DIRECTIVE:
                return self._parse_directive()
            case _:
                self._advance()
                return None

    def _collect_paragraph_lines(self, source_map: SourceMap, min_indent: int) -> None:
        """Append consecutive TEXT_LINE payloads indented at least ``min_indent``."""
        while (
            self._current is not None
            and self._current.type == TokenType.TEXT_LINE
            and self._current.indent >= min_indent
        ):
            source_map.add_token(self._current)
            self._advance()

    def _paragraph_from(self, source_map: SourceMap) -> Paragraph:
        """Build a Paragraph from joined lines."""
        return Paragraph(
            location=source_map.span(0, len(source_map.text)),
            children=self._parse_inline(source_map),
        )

    def _parse_paragraph(self, min_indent: int = 0) -> Paragraph:
        """Parse consecutive text lines into one paragraph."""
        source_map = SourceMap(self._source_file)
        self._collect_paragraph_lines(source_map, min_indent)
        return self._paragraph_from(source_map)

    def _parse_verbatim(self) -> Verbatim:
        """Parse ``` ... ``` into a Verbatim block.

        The lexer has already stripped the opener's indentation from every
        line and guarantees a closing fence.
        """
        open_token = self._current
        assert open_token is not None and open_token.type == TokenType.FENCE_OPEN
        self._advance()

        lines: list[str] = []
        while self._current is not None and self._current.type == TokenType.VERBATIM_LINE:
            lines.append(self._current.value)
            self._advance()

        close_token = self._current
        assert close_token is not None and close_token.type == TokenType.FENCE_CLOSE
        self._advance()

        return Verbatim(
            location=open_token.location.span_to(close_token.location),
            content="\n".join(lines),
            tags=close_token.tags,
            tag_locations=close_token.tag_locations,
        )

    def _parse_heading(self) -> None:
        """Open a section for the current HEADING token.

        Raises:
            StructuralError: Empty title or skipped nesting level.
        """
        token = self._current
        assert token is not None and token.type == TokenType.HEADING
        if not token.value:
            raise StructuralError("heading has no title", token.location)
        title = self._parse_inline(SourceMap.from_token(token, self._source_file))
        self._sections.open(token.level, title, token.location)
        self._advance()

    def _parse_section_return(self) -> None:
        """Return to the enclosing section named by the current SECTION_RETURN token."""
        token = self._current
        assert token is not None and token.type == TokenType.SECTION_RETURN
        self._sections.return_to(token.level, token.location)
        self._advance()
