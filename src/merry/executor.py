"""Directive executor.

Applies transformational directives to a resolved Document:
- nodes bound by the resolution pass are handed to each bound handler's
  ``qualify`` in tag order (``rewrite`` swaps verbatims for HTML fragments);
- every directive line is handed to its handler's ``invoke``; declarative
  lines return None and disappear, ``embed`` becomes an Embed node.

Work happens one node at a time in source order, so external commands run
sequentially and their outputs keep document order.

"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from merry.config import get_compile_config
from merry.directives.protocol import DirectiveContext
from merry.directives.registry import registry_from_config
from merry.errors import SemanticError
from merry.nodes import Directive, InlineVerbatim, QualifiedSpan, Verbatim
from merry.utils.logger import get_logger
from merry.visitor import transform

if TYPE_CHECKING:
    from merry.directives.registry import DirectiveRegistry
    from merry.nodes import Document, Node

logger = get_logger(__name__)


class Executor:
    """Runs directives over one resolved Document."""

    __slots__ = ("_registry", "_ctx", "_invoked", "_qualified")

    def __init__(
        self,
        registry: DirectiveRegistry | None = None,
        ctx: DirectiveContext | None = None,
    ) -> None:
        config = get_compile_config()
        self._registry = registry or registry_from_config(config)
        self._ctx = ctx
        self._invoked = 0
        self._qualified = 0

    def execute(self, document: Document) -> Document:
        """Return a new Document with every directive applied.

        Raises:
            ExternalProcessError: A ``rewrite`` command failed.
            SemanticError: A directive has no handler (unresolved documents only).
        """
        if self._ctx is None:
            self._ctx = DirectiveContext.from_config(get_compile_config(), document.source_file)
        result = transform(document, self._apply)
        logger.debug(
            "Executed %d directive(s) and %d bound node(s) in %s",
            self._invoked,
            self._qualified,
            document.source_file or "<string>",
        )
        return result

    def _apply(self, node: Node) -> Node | None:
        assert self._ctx is not None
        match node:
            case (
                Verbatim(bindings=bindings)
                | InlineVerbatim(bindings=bindings)
                | QualifiedSpan(bindings=bindings)
            ) if bindings:
                result: Node = dataclasses.replace(node, bindings=())
                for binding in bindings:
                    handler = self._registry.get(binding.name)
                    if handler is None:
                        raise SemanticError(
                            f"unknown directive '{binding.name}'",
                            binding.location,
                            directive_name=binding.name,
                        )
                    result = handler.qualify(result, binding, self._ctx)
                self._qualified += 1
                return result
            case Directive(name=name):
                handler = self._registry.get(name)
                if handler is None:
                    raise SemanticError(
                        f"unknown directive '{name}'", node.location, directive_name=name
                    )
                self._invoked += 1
                return handler.invoke(node, self._ctx)
            case _:
                return node


def execute(document: Document, registry: DirectiveRegistry | None = None) -> Document:
    """Apply every directive in a resolved ``document``.

    Returns:
        A new Document; the input is not modified.
    """
    return Executor(registry).execute(document)
