"""HTML renderer using the StringBuilder pattern.

Renders a resolved (and usually executed) Document to semantic HTML:
the root becomes ``<article>``, every section a ``<section>`` carrying its
heading, and blocks map onto their natural elements.

Margins:
A section reopened by a section return has ambiguous nesting: its resumed
content would otherwise look like part of the child section just before it.
Every child section emitted before resumed content therefore gets the
configured indent class, so the resumed text visibly returns to the
parent's margin. Sections that were never reopened get no class.

Thread Safety:
All per-render state lives in RenderContext, created fresh for each
render() call. A single HtmlRenderer may be shared across threads.

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from merry.config import get_compile_config
from merry.nodes import (
    Block,
    Directive,
    Document,
    Embed,
    Emphasis,
    EmphasisKind,
    HtmlBlock,
    HtmlInline,
    Inline,
    InlineVerbatim,
    Link,
    List,
    ListItem,
    Paragraph,
    QualifiedSpan,
    Section,
    Text,
    Verbatim,
)
from merry.stringbuilder import StringBuilder
from merry.utils.logger import get_logger
from merry.utils.text import escape_attr, escape_text
from merry.utils.text import slugify as default_slugify

logger = get_logger(__name__)

# Deepest level with a dedicated HTML heading element
MAX_HTML_HEADING = 6

_EMPHASIS_TAGS = {
    EmphasisKind.ITALIC: "em",
    EmphasisKind.BOLD: "strong",
    EmphasisKind.UNDERLINE: "u",
}


@dataclass(frozen=True, slots=True)
class HeadingInfo:
    """Heading metadata collected during rendering."""

    level: int
    text: str
    slug: str


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state."""

    headings: list[HeadingInfo] = field(default_factory=list)
    seen_slugs: set[str] = field(default_factory=set)


class HtmlRenderer:
    """Render a Document to HTML.

    Usage:
        >>> from merry import parse
        >>> HtmlRenderer().render(parse("# Hello *World*"))
        '<article>\\n<section id="hello-world">\\n<h1>Hello <strong>World</strong></h1>\\n</section>\\n</article>\\n'

    """

    __slots__ = ("_indent_class", "_slugify", "_last_context")

    def __init__(
        self,
        *,
        indent_class: str | None = None,
        slugify: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            indent_class: CSS class for sections needing a margin
                (defaults to CompileConfig.indent_class)
            slugify: Custom slugify function for section ids
        """
        self._indent_class = indent_class or get_compile_config().indent_class
        self._slugify = slugify or default_slugify
        self._last_context: RenderContext | None = None

    def render(self, document: Document) -> str:
        """Render ``document`` to an HTML fragment rooted at ``<article>``."""
        ctx = RenderContext()
        sb = StringBuilder()
        sb.append_line("<article>")
        self._render_children(document.root, sb, ctx)
        sb.append_line("</article>")
        self._last_context = ctx
        logger.debug(
            "Rendered %d section(s) from %s",
            len(ctx.headings),
            document.source_file or "<string>",
        )
        return sb.build()

    def get_headings(self) -> list[HeadingInfo]:
        """Heading info collected during the last render() call."""
        if self._last_context is None:
            return []
        return self._last_context.headings.copy()

    # =========================================================================
    # Sections
    # =========================================================================

    def _render_children(self, section: Section, sb: StringBuilder, ctx: RenderContext) -> None:
        margin_before = -1
        if section.reentered:
            for i, child in enumerate(section.children):
                if not isinstance(child, Section):
                    margin_before = i

        for i, child in enumerate(section.children):
            if isinstance(child, Section):
                self._render_section(child, sb, ctx, indented=i < margin_before)
            else:
                self._render_block(child, sb, ctx)

    def _render_section(
        self, section: Section, sb: StringBuilder, ctx: RenderContext, *, indented: bool
    ) -> None:
        text = extract_text(section.title)
        slug = self._unique_slug(text, ctx)
        ctx.headings.append(HeadingInfo(level=section.level, text=text, slug=slug))

        sb.open_tag("section", id=slug, class_=self._indent_class if indented else None)
        sb.append_line()
        if section.level <= MAX_HTML_HEADING:
            tag = f"h{section.level}"
            sb.open_tag(tag)
            self._render_inlines(section.title, sb)
            sb.close_tag(tag)
        else:
            sb.open_tag("p", role="heading", aria_level=str(section.level))
            self._render_inlines(section.title, sb)
            sb.close_tag("p")
        sb.append_line()
        self._render_children(section, sb, ctx)
        sb.append_line("</section>")

    def _unique_slug(self, text: str, ctx: RenderContext) -> str:
        slug = self._slugify(text) or "section"
        original_slug = slug
        counter = 1
        while slug in ctx.seen_slugs:
            slug = f"{original_slug}-{counter}"
            counter += 1
        ctx.seen_slugs.add(slug)
        return slug

    # =========================================================================
    # Block rendering
    # =========================================================================

    def _render_block(self, block: Block, sb: StringBuilder, ctx: RenderContext) -> None:
        match block:
            case Paragraph(children=children):
                sb.append("<p>")
                self._render_inlines(children, sb)
                sb.append_line("</p>")
            case List(items=items):
                sb.append_line("<ul>")
                for item in items:
                    self._render_list_item(item, sb, ctx)
                sb.append_line("</ul>")
            case ListItem():
                self._render_list_item(block, sb, ctx)
            case Verbatim(content=content):
                sb.append("<pre>").append(escape_text(content)).append_line("</pre>")
            case HtmlBlock(html=html):
                sb.append(html)
                if not html.endswith("\n"):
                    sb.append_line()
            case Embed(reference=reference):
                sb.append_line(reference)
            case Directive():
                pass  # Directive lines produce no output of their own
            case Section():
                self._render_section(block, sb, ctx, indented=False)

    def _render_list_item(self, item: ListItem, sb: StringBuilder, ctx: RenderContext) -> None:
        # A single paragraph renders inline: <li>text</li>
        match item.children:
            case (Paragraph(children=children),):
                sb.append("<li>")
                self._render_inlines(children, sb)
                sb.append_line("</li>")
            case _:
                sb.append_line("<li>")
                for child in item.children:
                    self._render_block(child, sb, ctx)
                sb.append_line("</li>")

    # =========================================================================
    # Inline rendering
    # =========================================================================

    def _render_inlines(self, nodes: tuple[Inline, ...], sb: StringBuilder) -> None:
        for node in nodes:
            self._render_inline(node, sb)

    def _render_inline(self, node: Inline, sb: StringBuilder) -> None:
        match node:
            case Text(content=content):
                sb.append(escape_text(content))
            case Emphasis(kind=kind, children=children):
                tag = _EMPHASIS_TAGS[kind]
                sb.open_tag(tag)
                self._render_inlines(children, sb)
                sb.close_tag(tag)
            case Link(url=url, children=children):
                sb.open_tag("a", href=url)
                self._render_inlines(children, sb)
                sb.close_tag("a")
            case InlineVerbatim(content=content):
                sb.append("<code>").append(escape_text(content)).append("</code>")
            case HtmlInline(html=html):
                sb.append(html)
            case QualifiedSpan(tags=tags, children=children):
                sb.open_tag("span", data_tag=" ".join(tags) or None)
                self._render_inlines(children, sb)
                sb.close_tag("span")


def extract_text(nodes: tuple[Inline, ...]) -> str:
    """Plain text of inline nodes (used for slugs and page titles)."""
    parts: list[str] = []
    for node in nodes:
        match node:
            case Text(content=content) | InlineVerbatim(content=content):
                parts.append(content)
            case Emphasis(children=children) | Link(children=children) | QualifiedSpan(
                children=children
            ):
                parts.append(extract_text(children))
    return "".join(parts)


def render_page(
    document: Document,
    *,
    title: str | None = None,
    head: str | None = None,
    renderer: HtmlRenderer | None = None,
) -> str:
    """Render ``document`` as a complete HTML page.

    Args:
        document: Executed document
        title: Page title (defaults to the first heading's text)
        head: Extra HTML inserted into ``<head>``
        renderer: Renderer to use for the body
    """
    body = (renderer or HtmlRenderer()).render(document)
    if title is None:
        title = next(
            (extract_text(child.title) for child in document.root.children if isinstance(child, Section)),
            "",
        )

    sb = StringBuilder()
    sb.append_line("<!DOCTYPE html>")
    sb.append_line("<html>")
    sb.append_line("<head>")
    sb.append_line('<meta charset="utf-8">')
    sb.append("<title>").append(escape_text(title)).append_line("</title>")
    if head:
        sb.append(head)
        if not head.endswith("\n"):
            sb.append_line()
    sb.append_line("</head>")
    sb.append_line("<body>")
    sb.append(body)
    sb.append_line("</body>")
    sb.append_line("</html>")
    return sb.build()
