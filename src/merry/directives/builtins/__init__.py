"""Builtin directive handlers.

- link / href: declarative hyperlink tags
- embed: asset embedding
- rewrite: external-process rewriting of tagged verbatims
"""

from merry.directives.builtins.embed import EmbedDirective
from merry.directives.builtins.link import LinkDirective
from merry.directives.builtins.rewrite import RewriteDirective

BUILTIN_HANDLERS = (LinkDirective, EmbedDirective, RewriteDirective)

__all__ = ["BUILTIN_HANDLERS", "EmbedDirective", "LinkDirective", "RewriteDirective"]
