"""``embed``: embed an asset in place of the directive line.

Syntax:
    | embed figures/diagram.svg

The asset resolver decides the HTML (``<img>``, ``<iframe>``...).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from merry.directives.protocol import DirectiveKind
from merry.nodes import Embed
from merry.utils.logger import get_logger

if TYPE_CHECKING:
    from merry.directives.protocol import DirectiveContext
    from merry.nodes import Block, Directive, DirectiveDeclaration, Node

logger = get_logger(__name__)


class EmbedDirective:
    names = ("embed",)
    kind = DirectiveKind.TRANSFORMATIONAL
    declares_tag = False
    arity = (1, 1)
    usage = "embed <path>"

    def invoke(self, directive: Directive, ctx: DirectiveContext) -> Block | None:
        path = directive.args[0]
        reference = ctx.asset_resolver.resolve(path)
        logger.debug("Embedded %s at %s", path, directive.location)
        return Embed(location=directive.location, path=path, reference=reference)

    def qualify(self, node: Node, declaration: DirectiveDeclaration, ctx: DirectiveContext) -> Node:
        # embed declares no tags, so nothing is ever bound to it
        return node

    def __repr__(self) -> str:
        return "EmbedDirective()"
