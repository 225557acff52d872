"""Directive system for merry.

Provides the handler protocol, the registry, and the builtin directives.

Example:
    >>> from merry.directives import create_registry_with_defaults
    >>> registry = create_registry_with_defaults().build()
    >>> sorted(registry.names)
    ['embed', 'href', 'link', 'rewrite']
"""

from merry.directives.builtins import EmbedDirective, LinkDirective, RewriteDirective
from merry.directives.protocol import DirectiveContext, DirectiveHandler, DirectiveKind
from merry.directives.registry import (
    DirectiveRegistry,
    DirectiveRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
    registry_from_config,
)

__all__ = [
    "DirectiveContext",
    "DirectiveHandler",
    "DirectiveKind",
    "DirectiveRegistry",
    "DirectiveRegistryBuilder",
    "EmbedDirective",
    "LinkDirective",
    "RewriteDirective",
    "create_default_registry",
    "create_registry_with_defaults",
    "registry_from_config",
]
