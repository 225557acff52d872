"""Section stack for the section-tree builder.

Open sections form a stack mirroring heading levels. Closing a section
freezes it into a Section node appended to its parent, so the tree is built
bottom-up while tokens are consumed top-down.

Usage:
    stack = SectionStack()
    stack.open(1, title, location)   # level-1 child of the root
    stack.add(paragraph)             # attaches to the level-1 section
    stack.return_to(1, location)     # no-op: already at level 1
    root, outline = stack.close_all()
"""

from __future__ import annotations

from dataclasses import dataclass, field

from merry.errors import StructuralError
from merry.location import SourceSpan
from merry.nodes import Block, Inline, Section, SectionEntry
from merry.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class SectionFrame:
    """An open section collecting its children.

    Attributes:
        level: Heading level (0 for the root)
        title: Parsed heading text
        location: Span of the heading line
        index: Outline handle
        parent: Outline handle of the enclosing section
        children: Blocks and closed child sections, in source order
        reentered: Set when a section return pops back to this frame

    """

    level: int
    title: tuple[Inline, ...]
    location: SourceSpan
    index: int
    parent: int | None
    children: list[Block] = field(default_factory=list)
    reentered: bool = False


class SectionStack:
    """Stack of open sections, rooted at the synthetic level-0 section."""

    __slots__ = ("_frames", "_entries")

    def __init__(self) -> None:
        root = SectionFrame(level=0, title=(), location=SourceSpan.unknown(), index=0, parent=None)
        self._frames: list[SectionFrame] = [root]
        self._entries: dict[int, SectionEntry] = {}

    @property
    def current(self) -> SectionFrame:
        """The innermost open section."""
        return self._frames[-1]

    @property
    def level(self) -> int:
        """Level of the innermost open section."""
        return self._frames[-1].level

    def _next_index(self) -> int:
        return len(self._entries) + len(self._frames)

    def add(self, block: Block) -> None:
        """Attach a block to the innermost open section."""
        self._frames[-1].children.append(block)

    def open(self, level: int, title: tuple[Inline, ...], location: SourceSpan) -> None:
        """Open a section for a heading of ``level``.

        Same level closes the current section and opens a sibling, one level
        deeper opens a child, a shallower level closes sections until its
        parent level is on top.

        Raises:
            StructuralError: The heading skips a nesting level.
        """
        top = self.level
        if level > top + 1:
            where = "the document root" if top == 0 else f"a level-{top} section"
            raise StructuralError(
                f"skipped nesting level: a level-{level} heading cannot appear directly "
                f"inside {where} (expected level {top + 1} or less)",
                location,
            )
        while self.level >= level:
            self._pop()
        parent = self._frames[-1].index
        self._frames.append(
            SectionFrame(
                level=level,
                title=title,
                location=location,
                index=self._next_index(),
                parent=parent,
            )
        )

    def return_to(self, level: int, location: SourceSpan) -> None:
        """Reopen the enclosing section at ``level`` without creating a node.

        Raises:
            StructuralError: No open section has that level.
        """
        if not any(frame.level == level for frame in self._frames[1:]):
            raise StructuralError(
                f"section return to level {level}, but no level-{level} section is open here "
                f"(innermost open level is {self.level})",
                location,
            )
        if self.level == level:
            return
        while self.level > level:
            self._pop()
        self._frames[-1].reentered = True
        logger.debug("Re-entered level-%d section at %s", level, location)

    def _pop(self) -> None:
        frame = self._frames.pop()
        section = Section(
            location=frame.location,
            level=frame.level,
            title=frame.title,
            children=tuple(frame.children),
            index=frame.index,
            parent=frame.parent,
            reentered=frame.reentered,
        )
        self._entries[frame.index] = SectionEntry(
            index=frame.index,
            level=frame.level,
            parent=frame.parent,
            reentered=frame.reentered,
            location=frame.location,
        )
        self._frames[-1].children.append(section)

    def close_all(self) -> tuple[Section, tuple[SectionEntry, ...]]:
        """Close every open section and return the root plus the outline."""
        while len(self._frames) > 1:
            self._pop()
        root = self._frames[0]
        self._entries[0] = SectionEntry(
            index=0, level=0, parent=None, reentered=root.reentered, location=root.location
        )
        outline = tuple(self._entries[i] for i in sorted(self._entries))
        section = Section(
            location=root.location,
            level=0,
            title=(),
            children=tuple(root.children),
            index=0,
            parent=None,
            reentered=root.reentered,
        )
        return section, outline
