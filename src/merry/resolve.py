"""Qualifier resolution pass.

Runs after the whole tree and every directive declaration are known, so a
tag may be used before the directive that declares it.

The pass:
1. Validates every directive line (known name, argument count, quotes).
2. Builds the tag table from handlers that declare tags.
3. Resolves every tag of every qualified span, tagged verbatim and tagged
   inline verbatim, in the order the tags are written. Declarative handlers
   (``link``) consume their tag and apply immediately; transformational
   handlers (``rewrite``) keep their tag and are recorded in the node's
   ``bindings`` for the executor.

Thread Safety:
Resolver instances are single-use. The input Document is never modified.

"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import TYPE_CHECKING

from merry.config import get_compile_config
from merry.directives.protocol import DirectiveContext, DirectiveKind
from merry.directives.registry import registry_from_config
from merry.errors import SemanticError
from merry.nodes import (
    Directive,
    DirectiveDeclaration,
    Document,
    Emphasis,
    InlineVerbatim,
    List,
    ListItem,
    Paragraph,
    QualifiedSpan,
    Section,
    Verbatim,
)
from merry.parsing.charsets import is_valid_tag
from merry.utils.logger import get_logger
from merry.visitor import iter_nodes

if TYPE_CHECKING:
    from merry.directives.protocol import DirectiveHandler
    from merry.directives.registry import DirectiveRegistry
    from merry.location import SourceSpan
    from merry.nodes import Block, Inline, Node, Tagged

logger = get_logger(__name__)


class Resolver:
    """Resolves tag qualifiers of one Document.

    Usage:
        >>> from merry.parser import Parser
        >>> doc = Parser("| href w https://w.org\\n[x]{w}").parse()
        >>> para = Resolver(doc).resolve().root.children[1]
        >>> para.children[0].url
        'https://w.org'

    """

    __slots__ = ("_document", "_registry", "_ctx", "_tags", "_resolved")

    def __init__(
        self,
        document: Document,
        registry: DirectiveRegistry | None = None,
        ctx: DirectiveContext | None = None,
    ) -> None:
        config = get_compile_config()
        self._document = document
        self._registry = registry or registry_from_config(config)
        self._ctx = ctx or DirectiveContext.from_config(config, document.source_file)
        self._tags: dict[str, list[DirectiveDeclaration]] = {}
        self._resolved = 0

    def resolve(self) -> Document:
        """Return a new Document with every tag usage resolved.

        Raises:
            SemanticError: Unknown directive, bad arguments, unresolved or
                conflicting tag, or a tag applied to an unsupported node.
        """
        self._validate_directives()
        self._build_tag_table()
        root = self._resolve_section(self._document.root)
        logger.debug(
            "Resolved %d tag usage(s) against %d tag(s) in %s",
            self._resolved,
            len(self._tags),
            self._document.source_file or "<string>",
        )
        if root is self._document.root:
            return self._document
        return dataclasses.replace(self._document, root=root)

    # =========================================================================
    # Directive validation
    # =========================================================================

    def _validate_directives(self) -> None:
        for node in iter_nodes(self._document.root):
            if isinstance(node, Directive):
                self._validate_directive(node)

    def _validate_directive(self, directive: Directive) -> None:
        name = directive.name
        if not name:
            raise SemanticError("directive line has no name", directive.location)

        handler = self._registry.get(name)
        if handler is None:
            known = ", ".join(sorted(self._registry.names))
            raise SemanticError(
                f"unknown directive '{name}' (known directives: {known})",
                directive.location,
                directive_name=name,
            )

        if directive.unterminated_quote:
            raise SemanticError(
                "malformed directive arguments: missing closing quote",
                directive.location,
                directive_name=name,
            )

        minimum, maximum = handler.arity
        count = len(directive.args)
        if count < minimum or (maximum is not None and count > maximum):
            if maximum is None:
                expected = f"at least {minimum}"
            elif minimum == maximum:
                expected = f"exactly {minimum}"
            else:
                expected = f"{minimum} to {maximum}"
            raise SemanticError(
                f"'{name}' takes {expected} argument(s), got {count} (usage: | {handler.usage})",
                directive.location,
                directive_name=name,
            )

        if handler.declares_tag and directive.args and not is_valid_tag(directive.args[0]):
            raise SemanticError(
                f"'{directive.args[0]}' cannot be used as a tag "
                "(tags contain no spaces, commas or braces)",
                directive.location,
                tag=directive.args[0],
                directive_name=name,
            )

    # =========================================================================
    # Tag table
    # =========================================================================

    def _build_tag_table(self) -> None:
        for declaration in self._document.iter_declarations():
            if declaration.tag is None:
                continue
            handler = self._registry.get(declaration.name)
            if handler is None or not handler.declares_tag:
                continue
            existing = self._tags.setdefault(declaration.tag, [])
            if existing:
                first = existing[0]
                if self._registry.get(first.name) is not handler:
                    raise SemanticError(
                        f"tag '{declaration.tag}' is declared by both '{first.name}' "
                        f"(line {first.location.lineno}) and '{declaration.name}'",
                        declaration.location,
                        tag=declaration.tag,
                        directive_name=declaration.name,
                    )
            existing.append(declaration)

    def _lookup(self, tag: str, location: SourceSpan, section: int) -> DirectiveDeclaration:
        """Find the declaration a usage in ``section`` refers to.

        The declaration made in the nearest enclosing section wins; otherwise
        the first declaration in source order.
        """
        candidates = self._tags.get(tag)
        if not candidates:
            raise SemanticError(
                f"unresolved tag '{tag}': no directive declares it "
                f"(for a link, add a line like '| href {tag} <url>')",
                location,
                tag=tag,
            )
        if len(candidates) > 1:
            for index in self._document.ancestors(section):
                for declaration in candidates:
                    if declaration.section == index:
                        return declaration
        return candidates[0]

    # =========================================================================
    # Tree rewrite
    # =========================================================================

    def _qualify(self, node: Tagged, section: int) -> Node:
        """Resolve every tag of ``node`` in written order.

        Transformational tags stay on the node with their declarations in
        ``bindings``. Declarative handlers then apply one after another, each
        to the result of the previous one.
        """
        locations = node.tag_locations or (node.location,) * len(node.tags)
        kept: list[tuple[str, SourceSpan]] = []
        bindings: list[DirectiveDeclaration] = []
        declarative: list[tuple[DirectiveHandler, DirectiveDeclaration]] = []

        for tag, location in zip(node.tags, locations, strict=True):
            declaration = self._lookup(tag, location, section)
            handler = self._registry.get(declaration.name)
            assert handler is not None
            self._resolved += 1
            if handler.kind is DirectiveKind.DECLARATIVE:
                declarative.append((handler, declaration))
            else:
                kept.append((tag, location))
                bindings.append(declaration)

        result: Node = dataclasses.replace(
            node,
            tags=tuple(tag for tag, _ in kept),
            tag_locations=tuple(location for _, location in kept),
            bindings=tuple(bindings),
        )
        for handler, declaration in declarative:
            result = handler.qualify(result, declaration, self._ctx)
        return result

    def _resolve_section(self, section: Section) -> Section:
        title = self._resolve_inlines(section.title, section.index)
        children = tuple(self._resolve_block(child, section.index) for child in section.children)
        if _same(title, section.title) and _same(children, section.children):
            return section
        return dataclasses.replace(section, title=title, children=children)

    def _resolve_block(self, block: Block, section: int) -> Block:
        match block:
            case Section():
                return self._resolve_section(block)
            case Paragraph(children=children):
                new_children = self._resolve_inlines(children, section)
                if _same(children, new_children):
                    return block
                return dataclasses.replace(block, children=new_children)
            case List(items=items):
                new_items = tuple(self._resolve_block(item, section) for item in items)
                if _same(items, new_items):
                    return block
                return dataclasses.replace(block, items=new_items)
            case ListItem(children=children):
                new_children = tuple(self._resolve_block(child, section) for child in children)
                if _same(children, new_children):
                    return block
                return dataclasses.replace(block, children=new_children)
            case Verbatim(tags=tags) if tags:
                return self._qualify(block, section)
            case _:
                return block

    def _resolve_inlines(self, nodes: tuple[Inline, ...], section: int) -> tuple[Inline, ...]:
        return tuple(self._resolve_inline(node, section) for node in nodes)

    def _resolve_inline(self, node: Inline, section: int) -> Inline:
        match node:
            case Emphasis(children=children):
                new_children = self._resolve_inlines(children, section)
                if _same(children, new_children):
                    return node
                return dataclasses.replace(node, children=new_children)
            case QualifiedSpan(children=children):
                new_children = self._resolve_inlines(children, section)
                if not _same(children, new_children):
                    node = dataclasses.replace(node, children=new_children)
                return self._qualify(node, section)
            case InlineVerbatim(tags=tags) if tags:
                return self._qualify(node, section)
            case _:
                return node


def _same(old: Sequence[object], new: Sequence[object]) -> bool:
    return len(old) == len(new) and all(a is b for a, b in zip(old, new, strict=True))


def resolve(document: Document, registry: DirectiveRegistry | None = None) -> Document:
    """Resolve every tag qualifier in ``document``.

    Args:
        document: Output of the parser
        registry: Directive registry (defaults to the configured one)

    Returns:
        A new Document; the input is not modified.
    """
    return Resolver(document, registry).resolve()
