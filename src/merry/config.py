"""ContextVar-based compile configuration for merry.

Config is set once per Merry instance and read by every pipeline stage in
the same context, so stages never thread configuration through arguments.

Thread Safety:
    Each thread has independent ContextVar storage, so concurrent
    compilations with different configs never mix.

Usage:
    with compile_config_context(CompileConfig(rewrite_timeout=5.0)):
        html = merry.compile(source)

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from merry.assets import AssetResolver
    from merry.directives.registry import DirectiveRegistry
    from merry.process import ProcessRunner


@dataclass(frozen=True, slots=True)
class CompileConfig:
    """Immutable compile configuration.

    Attributes:
        directive_registry: Registry of directive handlers. None means the
            builtin set (``link``/``href``, ``embed``, ``rewrite``).
        asset_resolver: Collaborator turning ``embed`` paths into HTML.
            None means DefaultAssetResolver.
        process_runner: Collaborator that runs ``rewrite`` commands.
            None means SubprocessRunner.
        rewrite_timeout: Seconds a ``rewrite`` command may run. None disables
            the timeout.
        indent_class: CSS class put on sections that need a margin to
            disambiguate their nesting depth.

    """

    directive_registry: DirectiveRegistry | None = None
    asset_resolver: AssetResolver | None = None
    process_runner: ProcessRunner | None = None
    rewrite_timeout: float | None = 30.0
    indent_class: str = "indented"

    @classmethod
    def from_dict(cls, config_dict: dict) -> CompileConfig:
        """Create CompileConfig from a dictionary, ignoring unknown keys.

        Example:
            >>> CompileConfig.from_dict({"rewrite_timeout": 2, "colour": "red"}).rewrite_timeout
            2

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


_DEFAULT_CONFIG: CompileConfig = CompileConfig()

_compile_config: ContextVar[CompileConfig] = ContextVar(
    "compile_config",
    default=_DEFAULT_CONFIG,
)


def get_compile_config() -> CompileConfig:
    """Get the active CompileConfig for this thread/context."""
    return _compile_config.get()


def set_compile_config(config: CompileConfig) -> None:
    """Set compile configuration for the current context."""
    _compile_config.set(config)


def reset_compile_config() -> None:
    """Reset the current context to the default configuration."""
    _compile_config.set(_DEFAULT_CONFIG)


@contextmanager
def compile_config_context(config: CompileConfig) -> Iterator[None]:
    """Use ``config`` for the duration of the block, then restore the previous one.

    Example:
        >>> with compile_config_context(CompileConfig(indent_class="nest")):
        ...     get_compile_config().indent_class
        'nest'

    """
    previous = _compile_config.get()
    _compile_config.set(config)
    try:
        yield
    finally:
        _compile_config.set(previous)


__all__ = [
    "CompileConfig",
    "compile_config_context",
    "get_compile_config",
    "reset_compile_config",
    "set_compile_config",
]
