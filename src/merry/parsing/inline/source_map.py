"""Offsets map for joined paragraph text.

Paragraph lines are joined with single spaces before inline parsing. The
SourceMap remembers where every joined segment came from so inline nodes
keep exact source spans.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from merry.location import SourceSpan
from merry.tokens import Token


@dataclass(frozen=True, slots=True)
class Segment:
    """One source line's contribution to the joined text."""

    joined_start: int
    source_start: int
    length: int
    lineno: int
    line_start: int


class SourceMap:
    """Joined text plus the positions it was taken from.

    Usage:
        >>> smap = SourceMap()
        >>> smap.add("Is", source_start=3, lineno=1, line_start=0)
        >>> smap.add("This", source_start=9, lineno=2, line_start=6)
        >>> smap.text
        'Is This'
        >>> str(smap.span(3, 7))
        '2:4'

    """

    __slots__ = ("_segments", "_starts", "_parts", "_length", "_text", "_source_file")

    def __init__(self, source_file: str | None = None) -> None:
        self._segments: list[Segment] = []
        self._starts: list[int] = []
        self._parts: list[str] = []
        self._length = 0
        self._text: str | None = None
        self._source_file = source_file

    @classmethod
    def from_token(cls, token: Token, source_file: str | None = None) -> SourceMap:
        """Map the payload (``value``) of a single token."""
        smap = cls(source_file)
        smap.add_token(token)
        return smap

    def add_token(self, token: Token) -> None:
        """Append a token's payload as the next segment."""
        location = token.location
        source_start = location.end_offset - len(token.value)
        line_start = location.offset - (location.col_offset - 1)
        self.add(token.value, source_start, location.lineno, line_start)

    def add(self, text: str, source_start: int, lineno: int, line_start: int) -> None:
        """Append ``text`` (one line, already stripped) as the next segment."""
        joined_start = self._length + 1 if self._parts else 0
        self._segments.append(Segment(joined_start, source_start, len(text), lineno, line_start))
        self._starts.append(joined_start)
        self._parts.append(text)
        self._length = joined_start + len(text)
        self._text = None

    @property
    def text(self) -> str:
        """The joined text."""
        if self._text is None:
            self._text = " ".join(self._parts)
        return self._text

    def __bool__(self) -> bool:
        return bool(self._parts)

    def _locate(self, index: int) -> tuple[Segment, int]:
        """Return the segment holding ``index`` and the matching source offset.

        Joining spaces map to the end of the segment before them.
        """
        i = max(bisect_right(self._starts, index) - 1, 0)
        segment = self._segments[i]
        delta = min(index - segment.joined_start, segment.length)
        return segment, segment.source_start + delta

    def span(self, start: int, end: int) -> SourceSpan:
        """Span of the joined-text range ``[start, end)``."""
        if not self._segments:
            return SourceSpan.unknown()
        first, first_offset = self._locate(start)
        if end > start:
            last, last_offset = self._locate(end - 1)
            last_offset += 1
        else:
            last, last_offset = first, first_offset
        return SourceSpan(
            lineno=first.lineno,
            col_offset=first_offset - first.line_start + 1,
            offset=first_offset,
            end_offset=last_offset,
            end_lineno=last.lineno,
            end_col_offset=last_offset - last.line_start + 1,
            source_file=self._source_file,
        )
