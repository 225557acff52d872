"""List parsing for merry.

A ``-- `` marker at column c starts an item whose content column is c + 3.
Lines attach to the item only when indented to the content column; anything
shallower ends the item. Markers at column c continue the list, markers at
or beyond the content column start a nested list inside the item. A single
blank line keeps a list open, two consecutive blank lines close it.

Example:
    -- Is
       This          <- attached (column 3)
    -- It
      is not         <- column 2: ends the list, starts a paragraph
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from merry.errors import StructuralError
from merry.nodes import Block, List, ListItem
from merry.parsing.inline.source_map import SourceMap
from merry.tokens import Token, TokenType

if TYPE_CHECKING:
    from merry.nodes import Paragraph

MARKER_WIDTH = 3  # "-- "

# A list survives one blank line between items, not two
MAX_BLANK_LINES = 1

_ITEM_CONTENT = frozenset(
    {TokenType.TEXT_LINE, TokenType.LIST_MARKER, TokenType.FENCE_OPEN, TokenType.DIRECTIVE}
)
_SECTIONING = frozenset({TokenType.HEADING, TokenType.SECTION_RETURN})


class ListParsingMixin:
    """Mixin for list parsing.

    Required Host Attributes:
        - _current: Token | None
        - _source_file: str | None

    Required Host Methods:
        - _advance() -> Token | None
        - _peek(offset) -> Token | None
        - _count_blank_lines() -> int
        - _skip_blank_lines(count) -> Token | None
        - _parse_block(min_indent) -> Block | None
        - _collect_paragraph_lines(source_map, min_indent) -> None
        - _paragraph_from(source_map) -> Paragraph

    """

    _current: Token | None
    _source_file: str | None

    def _parse_list(self, marker_indent: int) -> List:
        """Parse items whose markers sit at ``marker_indent``."""
        items: list[ListItem] = []

        while True:
            items.append(self._parse_list_item())

            blanks = self._count_blank_lines()
            following = self._peek(blanks)
            if (
                blanks > MAX_BLANK_LINES
                or following is None
                or following.type != TokenType.LIST_MARKER
                or following.indent != marker_indent
            ):
                break
            self._skip_blank_lines(blanks)

        return List(location=items[0].location.span_to(items[-1].location), items=tuple(items))

    def _parse_list_item(self) -> ListItem:
        """Parse one item: the marker line, its attached lines, and nested blocks.

        Raises:
            StructuralError: A heading or section return indented into the item.
        """
        marker = self._current
        assert marker is not None and marker.type == TokenType.LIST_MARKER
        content_indent = marker.indent + MARKER_WIDTH
        self._advance()

        children: list[Block] = []
        source_map = SourceMap(self._source_file)
        if marker.value:
            source_map.add_token(marker)
        self._collect_paragraph_lines(source_map, content_indent)
        if source_map:
            children.append(self._paragraph_from(source_map))

        while True:
            blanks = self._count_blank_lines()
            following = self._peek(blanks)
            if blanks > MAX_BLANK_LINES or following is None:
                break
            if following.indent < content_indent:
                break
            if following.type in _SECTIONING:
                raise StructuralError(
                    "heading inside list item: headings and section returns must not be "
                    f"indented to a list item's content column ({content_indent})",
                    following.location,
                )
            if following.type not in _ITEM_CONTENT:
                break
            self._skip_blank_lines(blanks)
            block = self._parse_block(content_indent)
            if block is not None:
                children.append(block)

        location = marker.location
        if children:
            location = location.span_to(children[-1].location)
        return ListItem(location=location, children=tuple(children))
