"""Typed document nodes for merry.

All nodes are frozen dataclasses with slots. The resolution and execution
passes never mutate a node; they rebuild the affected ancestors with
``dataclasses.replace`` and return a new Document.

Node Hierarchy:
Node (base)
├── Block (block-level elements)
│   ├── Section
│   ├── Paragraph
│   ├── List
│   ├── ListItem
│   ├── Verbatim
│   ├── Directive
│   ├── HtmlBlock
│   └── Embed
└── Inline (inline elements)
    ├── Text
    ├── Emphasis
    ├── QualifiedSpan
    ├── InlineVerbatim
    ├── Link
    └── HtmlInline

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias

from merry.location import SourceSpan

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all document nodes.

    Every node tracks the span of the source text it was built from.

    """

    location: SourceSpan


# =============================================================================
# Directive bookkeeping
# =============================================================================


@dataclass(frozen=True, slots=True)
class DirectiveDeclaration:
    """A directive line, recorded for tag lookup.

    Attributes:
        name: Directive name as written (``link``, ``href``, ``rewrite``...)
        tag: First argument, or None for directives without arguments
        args: Remaining arguments after the tag
        section: Outline index of the section the directive appears in
        location: Span of the directive line

    """

    name: str
    tag: str | None
    args: tuple[str, ...]
    section: int
    location: SourceSpan


# =============================================================================
# Inline Nodes
# =============================================================================


class EmphasisKind(Enum):
    """Emphasis flavours."""

    ITALIC = "~"
    BOLD = "*"
    UNDERLINE = "_"

    @property
    def delimiter(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text content."""

    content: str


@dataclass(frozen=True, slots=True)
class Emphasis(Node):
    """Italic, bold or underlined text.

    Source: ~text~ (italic), *text* (bold) or _text_ (underline)
    HTML: <em>text</em>, <strong>text</strong> or <u>text</u>

    """

    kind: EmphasisKind
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class QualifiedSpan(Node):
    """Bracketed text qualified by one or more tags.

    Source: [text]{tag} or [text]{a, b}

    Each tag is looked up among directive declarations during resolution.
    Declarative directives consume their tag; ``bindings`` records the
    transformational directives the executor still has to apply, in tag order.

    """

    tags: tuple[str, ...]
    children: tuple[Inline, ...]
    tag_locations: tuple[SourceSpan, ...] = ()
    bindings: tuple[DirectiveDeclaration, ...] = ()


@dataclass(frozen=True, slots=True)
class InlineVerbatim(Node):
    """Raw inline text, optionally qualified.

    Source: `code` or `code`{tag}
    HTML: <code>code</code>

    ``bindings`` is filled in by the resolution pass for tags that belong to
    transformational directives such as ``rewrite``.

    """

    content: str
    tags: tuple[str, ...] = ()
    tag_locations: tuple[SourceSpan, ...] = ()
    bindings: tuple[DirectiveDeclaration, ...] = ()


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink produced by resolving a qualified span against ``link``/``href``.

    HTML: <a href="url">text</a>

    """

    url: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class HtmlInline(Node):
    """Inline HTML fragment emitted verbatim (output of ``rewrite``)."""

    html: str


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph of inline content.

    Consecutive text lines are joined with single spaces before inline parsing.

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    """A list item. Items are block containers.

    Source: ``-- text`` followed by lines indented to the content column.

    """

    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class List(Node):
    """Unordered list.

    HTML: <ul><li>...</li></ul>

    """

    items: tuple[ListItem, ...]


@dataclass(frozen=True, slots=True)
class Verbatim(Node):
    """Verbatim block delimited by triple-backtick fences.

    Content is stored raw and never inline-parsed. An optional ``{tag}`` after
    the closing fence qualifies the whole block.

    """

    content: str
    tags: tuple[str, ...] = ()
    tag_locations: tuple[SourceSpan, ...] = ()
    bindings: tuple[DirectiveDeclaration, ...] = ()


@dataclass(frozen=True, slots=True)
class Directive(Node):
    """A directive line: ``| name arg...``.

    Attributes:
        name: Directive name
        args: Quote-aware split of the arguments (tag first, where relevant)
        raw: Argument text as written
        unterminated_quote: True when a double-quoted argument never closes

    """

    name: str
    args: tuple[str, ...] = ()
    raw: str = ""
    unterminated_quote: bool = False


@dataclass(frozen=True, slots=True)
class HtmlBlock(Node):
    """Block-level HTML fragment emitted verbatim (output of ``rewrite``)."""

    html: str


@dataclass(frozen=True, slots=True)
class Embed(Node):
    """Executed ``embed`` directive.

    ``reference`` is the HTML produced by the asset resolver for ``path``.

    """

    path: str
    reference: str


@dataclass(frozen=True, slots=True)
class Section(Node):
    """A heading and everything nested under it.

    The synthetic root section has level 0 and an empty title.

    Attributes:
        level: Heading level (0 for the root)
        title: Parsed heading text
        children: Blocks and child sections in source order
        index: Handle into Document.outline
        parent: Outline index of the parent section (None for the root)
        reentered: True when a section return reopened this section

    """

    level: int
    title: tuple[Inline, ...]
    children: tuple[Block, ...]
    index: int = 0
    parent: int | None = None
    reentered: bool = False


@dataclass(frozen=True, slots=True)
class SectionEntry:
    """Outline record for one section, addressed by its index."""

    index: int
    level: int
    parent: int | None
    reentered: bool
    location: SourceSpan


# =============================================================================
# Document
# =============================================================================


DeclarationKey: TypeAlias = tuple[str, str | None]


@dataclass(frozen=True, slots=True)
class Document:
    """A compilation unit.

    Attributes:
        root: Level-0 section holding the whole tree
        outline: Section entries indexed by Section.index
        declarations: Directive declarations keyed by (name, tag), in source order
        source: Normalized source text
        source_file: Path of the source, for diagnostics

    """

    root: Section
    outline: tuple[SectionEntry, ...] = ()
    declarations: Mapping[DeclarationKey, tuple[DirectiveDeclaration, ...]] = field(
        default_factory=dict
    )
    source: str = ""
    source_file: str | None = None

    def ancestors(self, index: int) -> list[int]:
        """Return ``index`` followed by each enclosing section index up to the root."""
        chain: list[int] = []
        current: int | None = index
        while current is not None:
            chain.append(current)
            current = self.outline[current].parent
        return chain

    def iter_declarations(self) -> list[DirectiveDeclaration]:
        """All declarations in source order."""
        found = [decl for decls in self.declarations.values() for decl in decls]
        found.sort(key=lambda decl: decl.location.offset)
        return found


# PEP 695 type aliases
Inline: TypeAlias = Text | Emphasis | QualifiedSpan | InlineVerbatim | Link | HtmlInline

Block: TypeAlias = (
    Section | Paragraph | List | ListItem | Verbatim | Directive | HtmlBlock | Embed
)

# Nodes that carry tag qualifiers
Tagged: TypeAlias = QualifiedSpan | InlineVerbatim | Verbatim
