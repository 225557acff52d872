"""Name → handler table consulted for every ``| name ...`` line.

The resolution pass validates directive lines and builds the tag table
against a registry; the executor dispatches ``invoke`` and bound ``qualify``
calls through the same registry. One handler may answer to several names
(``link`` and ``href``), which is why tags declared under either name share
one meaning.

Thread Safety:
DirectiveRegistry is frozen once built and may be shared by concurrent
compilations. DirectiveRegistryBuilder is for single-threaded setup.

Example:
    >>> registry = create_registry_with_defaults().register(AbbrDirective()).build()
    >>> registry.get("href")
    LinkDirective()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from merry.directives.protocol import DirectiveKind

if TYPE_CHECKING:
    from merry.config import CompileConfig
    from merry.directives.protocol import DirectiveHandler


# Class attributes every handler must expose before it can be dispatched to
_REQUIRED_ATTRIBUTES = ("names", "kind", "declares_tag", "arity", "usage")


class DirectiveRegistry:
    """Frozen mapping from directive names to handlers."""

    __slots__ = ("_handlers", "_by_name")

    def __init__(
        self,
        handlers: tuple[DirectiveHandler, ...],
        by_name: dict[str, DirectiveHandler],
    ) -> None:
        """Built by DirectiveRegistryBuilder.build(); not meant to be called directly."""
        self._handlers = handlers
        self._by_name = by_name

    def get(self, name: str) -> DirectiveHandler | None:
        """Handler for the name written after ``|``, or None when no handler claims it."""
        return self._by_name.get(name)

    def has(self, name: str) -> bool:
        return name in self._by_name

    @property
    def names(self) -> frozenset[str]:
        """Every accepted directive name, aliases included (listed in unknown-name errors)."""
        return frozenset(self._by_name.keys())

    @property
    def handlers(self) -> tuple[DirectiveHandler, ...]:
        """Distinct handlers in registration order; an aliased handler appears once."""
        return self._handlers

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        """Number of accepted names, so ``link`` and ``href`` count twice."""
        return len(self._by_name)


class DirectiveRegistryBuilder:
    """Collects handlers and checks them before they reach a compilation.

    Builtins come from create_registry_with_defaults(); custom directives are
    added with register() and the result frozen with build().
    """

    __slots__ = ("_handlers", "_by_name")

    def __init__(self) -> None:
        self._handlers: list[DirectiveHandler] = []
        self._by_name: dict[str, DirectiveHandler] = {}

    def register(self, handler: DirectiveHandler) -> DirectiveRegistryBuilder:
        """Claim every name in ``handler.names`` for ``handler``.

        Returns:
            Self for chaining

        Raises:
            TypeError: The handler lacks one of names, kind, declares_tag,
                arity or usage, or its kind is not a DirectiveKind
            ValueError: One of its names is already claimed, e.g. a custom
                handler that also answers to ``href``
        """
        for attribute in _REQUIRED_ATTRIBUTES:
            if not hasattr(handler, attribute):
                msg = f"Handler {type(handler).__name__} missing {attribute!r} attribute"
                raise TypeError(msg)

        if not isinstance(handler.kind, DirectiveKind):
            msg = f"Handler {type(handler).__name__} has invalid kind {handler.kind!r}"
            raise TypeError(msg)

        for name in handler.names:
            if name in self._by_name:
                existing = self._by_name[name]
                msg = f"Directive '{name}' already registered by {type(existing).__name__}"
                raise ValueError(msg)
            self._by_name[name] = handler

        self._handlers.append(handler)
        return self

    def register_all(self, handlers: list[DirectiveHandler]) -> DirectiveRegistryBuilder:
        for handler in handlers:
            self.register(handler)
        return self

    def build(self) -> DirectiveRegistry:
        """Freeze the collected handlers; later register() calls do not affect it."""
        return DirectiveRegistry(
            handlers=tuple(self._handlers),
            by_name=dict(self._by_name),
        )

    def __len__(self) -> int:
        return len(self._handlers)


# Built once; shared by every compilation that configures no registry
_DEFAULT_REGISTRY: DirectiveRegistry | None = None


def create_default_registry() -> DirectiveRegistry:
    """The builtin registry, used when CompileConfig.directive_registry is None.

    Holds ``link``/``href`` (declarative links), ``embed`` (assets in place
    of the directive line) and ``rewrite`` (tagged verbatims piped through a
    command).
    """
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = create_registry_with_defaults().build()
    return _DEFAULT_REGISTRY


def create_registry_with_defaults() -> DirectiveRegistryBuilder:
    """A fresh builder holding the builtins, ready for custom directives.

        >>> registry = create_registry_with_defaults().register(ShoutDirective()).build()
        >>> Merry(CompileConfig(directive_registry=registry))("[hi]{s}\\n| shout s")
    """
    from merry.directives.builtins import BUILTIN_HANDLERS

    builder = DirectiveRegistryBuilder()
    builder.register_all([handler_class() for handler_class in BUILTIN_HANDLERS])
    return builder


def registry_from_config(config: CompileConfig) -> DirectiveRegistry:
    """The configured registry, or the builtin one."""
    return config.directive_registry or create_default_registry()
