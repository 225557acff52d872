"""``link`` / ``href``: turn qualified text into hyperlinks.

Syntax:
    | href wiki https://en.wikipedia.org
    See the [encyclopedia]{wiki} or `man 1 ls`{wiki}.

Declarative: the directive line itself produces no output. When a span
carries further tags (``[x]{wiki, math}``), the link wraps the span so the
remaining directives still apply to it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from merry.directives.protocol import DirectiveKind
from merry.errors import SemanticError
from merry.nodes import InlineVerbatim, Link, QualifiedSpan

if TYPE_CHECKING:
    from merry.directives.protocol import DirectiveContext
    from merry.nodes import Block, Directive, DirectiveDeclaration, Node


class LinkDirective:
    """Qualified spans become ``<a>``; inline verbatims become linked code."""

    names = ("link", "href")
    kind = DirectiveKind.DECLARATIVE
    declares_tag = True
    arity = (2, 2)
    usage = "href <tag> <url>"

    def invoke(self, directive: Directive, ctx: DirectiveContext) -> Block | None:
        return None

    def qualify(self, node: Node, declaration: DirectiveDeclaration, ctx: DirectiveContext) -> Node:
        url = declaration.args[0]
        match node:
            case QualifiedSpan(tags=(), children=children):
                return Link(location=node.location, url=url, children=children)
            case QualifiedSpan() | InlineVerbatim():
                return Link(location=node.location, url=url, children=(node,))
            case Link(url=existing):
                raise SemanticError(
                    f"tag '{declaration.tag}' would link text that already links to {existing}",
                    node.location,
                    tag=declaration.tag,
                    directive_name=declaration.name,
                )
            case _:
                raise SemanticError(
                    f"tag '{declaration.tag}' is a link declared by '{declaration.name}' "
                    f"at line {declaration.location.lineno}; links cannot qualify a verbatim block",
                    node.location,
                    tag=declaration.tag,
                    directive_name=declaration.name,
                )

    def __repr__(self) -> str:
        return "LinkDirective()"
