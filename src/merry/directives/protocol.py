"""DirectiveHandler protocol for line directives.

Directives are the extension mechanism of the language. A directive is
either declarative (it only attaches meaning to tags, like ``link``) or
transformational (it replaces nodes in the tree, like ``embed`` and
``rewrite``).

Lifecycle:
1. The resolution pass validates every directive line against ``names`` and
   ``arity``, and matches tag usages against declarations of handlers with
   ``declares_tag``.
2. For declarative handlers ``qualify`` is applied during resolution and
   the tag is consumed; for transformational handlers the usage is bound and
   ``qualify`` runs in the executor. A node with several tags goes through
   each handler in the order the tags are written.
3. The executor calls ``invoke`` for every directive line. Returning None
   removes the line from the output.

Thread Safety:
Handlers must be stateless. Everything they need arrives through the
DirectiveContext. Multiple threads may call the same handler instance.

Example:
    >>> class AbbrDirective:
    ...     names = ("abbr",)
    ...     kind = DirectiveKind.DECLARATIVE
    ...     declares_tag = True
    ...     arity = (2, 2)
    ...     usage = "abbr <tag> <expansion>"
    ...
    ...     def invoke(self, directive, ctx):
    ...         return None
    ...
    ...     def qualify(self, node, declaration, ctx):
    ...         return node
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from merry.assets import AssetResolver
    from merry.config import CompileConfig
    from merry.nodes import Block, Directive, DirectiveDeclaration, Node
    from merry.process import ProcessRunner


class DirectiveKind(Enum):
    """How a directive affects the document."""

    DECLARATIVE = auto()  # Gives meaning to tags, produces no output
    TRANSFORMATIONAL = auto()  # Replaces nodes


@dataclass(frozen=True, slots=True)
class DirectiveContext:
    """Collaborators handed to directive handlers.

    Attributes:
        asset_resolver: Resolves ``embed`` paths to HTML
        process_runner: Runs external commands for ``rewrite``
        source_file: Path of the document being compiled

    """

    asset_resolver: AssetResolver
    process_runner: ProcessRunner
    source_file: str | None = None

    @classmethod
    def from_config(cls, config: CompileConfig, source_file: str | None = None) -> DirectiveContext:
        """Fill in default collaborators for whatever ``config`` leaves unset."""
        from merry.assets import DefaultAssetResolver
        from merry.process import SubprocessRunner

        return cls(
            asset_resolver=config.asset_resolver or DefaultAssetResolver(),
            process_runner=config.process_runner or SubprocessRunner(config.rewrite_timeout),
            source_file=source_file,
        )


@runtime_checkable
class DirectiveHandler(Protocol):
    """Protocol for directive implementations.

    Attributes:
        names: Directive names this handler responds to, e.g. ("link", "href")
        kind: DECLARATIVE or TRANSFORMATIONAL
        declares_tag: True when the first argument declares a tag that
            qualified spans and verbatims may use
        arity: (minimum, maximum) argument count; maximum None is unbounded
        usage: Argument synopsis shown in error messages

    """

    names: ClassVar[tuple[str, ...]]
    kind: ClassVar[DirectiveKind]
    declares_tag: ClassVar[bool]
    arity: ClassVar[tuple[int, int | None]]
    usage: ClassVar[str]

    def invoke(self, directive: Directive, ctx: DirectiveContext) -> Block | None:
        """Execute a directive line.

        Returns:
            A block that replaces the directive line, or None to drop it.
        """
        ...

    def qualify(self, node: Node, declaration: DirectiveDeclaration, ctx: DirectiveContext) -> Node:
        """Apply the directive to a node qualified with its tag.

        ``node`` is a QualifiedSpan, a Verbatim or an InlineVerbatim, or
        whatever an earlier handler returned for the same tagged node.

        Raises:
            SemanticError: The directive cannot apply to this kind of node.
            ExternalProcessError: An external command failed.
        """
        ...
