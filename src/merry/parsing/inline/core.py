"""Core inline parsing for merry.

Inline syntax:
    ~text~          italic
    *text*          bold
    _text_          underline
    `text`          inline verbatim (raw, optionally followed by {tag})
    [text]{tag}     qualified span
    {a, b} {a b}    several tags on one qualifier

Matching is nearest-neighbour with nesting: an opener pairs with the next
same-kind delimiter that is not inside a nested construct. A nested construct
that runs into an enclosing construct's closer, or into the end of the text,
is unmatched; its opener becomes literal text and scanning resumes right
after it. Delimiters never nest inside themselves.

Thread Safety:
InlineScanner instances are single-use and instance-local.

"""

from __future__ import annotations

from typing import NamedTuple, TypeAlias

from merry.location import SourceSpan
from merry.nodes import Emphasis, EmphasisKind, Inline, InlineVerbatim, QualifiedSpan, Text
from merry.parsing.charsets import BACKTICK, EMPHASIS_DELIMITERS, INLINE_SPECIAL, split_tags
from merry.parsing.inline.source_map import SourceMap

RunKey: TypeAlias = tuple[int, str | None, frozenset[str]]


class InlineRun(NamedTuple):
    """Result of scanning from an opener to its closer (or to a stop)."""

    nodes: tuple[Inline, ...]
    end: int  # Position of the closer, or where scanning stopped
    closed: bool


class TagMatch(NamedTuple):
    tags: tuple[str, ...]
    locations: tuple[SourceSpan, ...]
    end: int  # Position after the closing brace


class InlineScanner:
    """Recursive-descent inline scanner over one joined text.

    Runs are memoized by (start, closer, stop set), so a run of unmatched
    openers costs linear rescans rather than exponential ones.

    """

    __slots__ = ("_text", "_map", "_memo")

    def __init__(self, source_map: SourceMap) -> None:
        self._map = source_map
        self._text = source_map.text
        self._memo: dict[RunKey, InlineRun] = {}

    def parse(self) -> tuple[Inline, ...]:
        """Parse the whole text."""
        return self._run(0, None, frozenset()).nodes

    def _run(self, start: int, closer: str | None, stop: frozenset[str]) -> InlineRun:
        """Scan from ``start`` until ``closer``, a character in ``stop``, or the end."""
        key = (start, closer, stop)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        text = self._text
        text_len = len(text)
        nodes: list[Inline] = []
        buf_start = start
        pos = start
        child_stop = stop | {closer} if closer is not None else stop
        result: InlineRun | None = None

        while pos < text_len:
            char = text[pos]

            if char == closer:
                self._flush(nodes, buf_start, pos)
                result = InlineRun(_coalesce(nodes), pos, True)
                break

            if char in stop:
                # An enclosing construct closes first: this one is unmatched
                result = InlineRun((), pos, False)
                break

            if char not in INLINE_SPECIAL:
                pos += 1
                continue

            if char == BACKTICK:
                parsed = self._try_verbatim(pos)
            elif char == "[":
                parsed = self._try_bracket(pos, child_stop)
            else:
                parsed = self._try_emphasis(pos, child_stop)

            if parsed is None:
                # Unmatched opener is literal text
                pos += 1
                continue

            produced, after = parsed
            self._flush(nodes, buf_start, pos)
            nodes.extend(produced)
            pos = buf_start = after

        if result is None:
            if closer is None:
                self._flush(nodes, buf_start, pos)
                result = InlineRun(_coalesce(nodes), pos, True)
            else:
                result = InlineRun((), pos, False)

        self._memo[key] = result
        return result

    def _flush(self, nodes: list[Inline], start: int, end: int) -> None:
        """Append pending literal text ``[start, end)``."""
        if start < end:
            nodes.append(Text(location=self._map.span(start, end), content=self._text[start:end]))

    def _read_tag(self, pos: int) -> TagMatch | None:
        """Read ``{tag}`` or ``{a, b}`` starting exactly at ``pos``."""
        text = self._text
        if pos >= len(text) or text[pos] != "{":
            return None
        close = text.find("}", pos + 1)
        if close == -1:
            return None
        tags = split_tags(text[pos + 1 : close])
        if tags is None:
            return None
        inner = pos + 1
        spans = tuple(
            self._map.span(inner + offset, inner + offset + len(tag)) for tag, offset in tags
        )
        return TagMatch(tuple(tag for tag, _ in tags), spans, close + 1)

    def _try_verbatim(self, pos: int) -> tuple[list[Inline], int] | None:
        """`content` with optional {tag}. Content is raw."""
        close = self._text.find(BACKTICK, pos + 1)
        if close == -1:
            return None
        after = close + 1
        tag = self._read_tag(after)
        end = tag.end if tag else after
        node = InlineVerbatim(
            location=self._map.span(pos, end),
            content=self._text[pos + 1 : close],
            tags=tag.tags if tag else (),
            tag_locations=tag.locations if tag else (),
        )
        return [node], end

    def _try_emphasis(self, pos: int, stop: frozenset[str]) -> tuple[list[Inline], int] | None:
        """~italic~, *bold* or _underline_. Empty emphasis is literal."""
        delimiter = self._text[pos]
        if delimiter not in EMPHASIS_DELIMITERS:
            return None
        run = self._run(pos + 1, delimiter, stop)
        if not run.closed or not run.nodes:
            return None
        node = Emphasis(
            location=self._map.span(pos, run.end + 1),
            kind=EmphasisKind(delimiter),
            children=run.nodes,
        )
        return [node], run.end + 1

    def _try_bracket(self, pos: int, stop: frozenset[str]) -> tuple[list[Inline], int] | None:
        """[text]{tag}, or literal brackets around parsed text without a tag."""
        run = self._run(pos + 1, "]", stop)
        if not run.closed:
            return None
        after = run.end + 1
        tag = self._read_tag(after)
        if tag is None:
            return [
                Text(location=self._map.span(pos, pos + 1), content="["),
                *run.nodes,
                Text(location=self._map.span(run.end, after), content="]"),
            ], after
        node = QualifiedSpan(
            location=self._map.span(pos, tag.end),
            tags=tag.tags,
            children=run.nodes,
            tag_locations=tag.locations,
        )
        return [node], tag.end


def _coalesce(nodes: list[Inline]) -> tuple[Inline, ...]:
    """Merge adjacent Text nodes."""
    merged: list[Inline] = []
    for node in nodes:
        if merged and isinstance(node, Text) and isinstance(merged[-1], Text):
            previous = merged[-1]
            merged[-1] = Text(
                location=previous.location.span_to(node.location),
                content=previous.content + node.content,
            )
        else:
            merged.append(node)
    return tuple(merged)


class InlineParsingMixin:
    """Inline parsing for paragraph, list-item and heading text.

    Required Host Attributes:
        - _source_file: str | None

    """

    def _parse_inline(self, source_map: SourceMap) -> tuple[Inline, ...]:
        """Parse the joined text of ``source_map`` into inline nodes."""
        if not source_map.text:
            return ()
        return InlineScanner(source_map).parse()


def parse_inline(text: str, *, source_file: str | None = None) -> tuple[Inline, ...]:
    """Parse a single line of inline text that starts at offset 0, line 1.

    Example:
        >>> parse_inline("~hi~")[0].kind
        <EmphasisKind.ITALIC: '~'>
    """
    source_map = SourceMap(source_file)
    source_map.add(text, source_start=0, lineno=1, line_start=0)
    if not text:
        return ()
    return InlineScanner(source_map).parse()
