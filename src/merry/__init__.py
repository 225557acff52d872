"""
merry: a compiler from a constrained markdown dialect to semantic HTML.

Documents are built from rigidly nested sections, lists, paragraphs and
verbatim blocks. Inline text supports ``~italic~``, ``*bold*``, ```code```
and tag-qualified spans ``[text]{tag}`` whose meaning comes from directive
lines such as ``| href tag https://example.org``.

Quick Start:
    >>> from merry import compile
    >>> print(compile("# Hello\\n[world]{w}\\n| href w https://w.org"))
    <article>
    <section id="hello">
    <h1>Hello</h1>
    <p><a href="https://w.org">world</a></p>
    </section>
    </article>
    <BLANKLINE>

    >>> # Or step by step
    >>> from merry import parse, resolve, execute, render
    >>> html = render(execute(resolve(parse("# Hello"))))

Custom Directives:
    >>> from merry import Merry, CompileConfig, create_registry_with_defaults
    >>> builder = create_registry_with_defaults()
    >>> builder.register(MyDirective())
    >>> merry = Merry(CompileConfig(directive_registry=builder.build()))

"""

from __future__ import annotations

from pathlib import Path

from merry.assets import AssetResolver, DefaultAssetResolver
from merry.config import (
    CompileConfig,
    compile_config_context,
    get_compile_config,
    reset_compile_config,
    set_compile_config,
)
from merry.directives import (
    DirectiveContext,
    DirectiveHandler,
    DirectiveKind,
    DirectiveRegistry,
    DirectiveRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
)
from merry.errors import (
    ExternalProcessError,
    LexError,
    MerryError,
    SemanticError,
    StructuralError,
)
from merry.executor import Executor
from merry.lexer import Lexer, tokenize
from merry.location import SourceSpan
from merry.nodes import (
    Block,
    Directive,
    DirectiveDeclaration,
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
    Node,
    Paragraph,
    QualifiedSpan,
    Section,
    SectionEntry,
    Text,
    Verbatim,
)
from merry.parser import Parser
from merry.process import ProcessResult, ProcessRunner, SubprocessRunner
from merry.renderers.html import HtmlRenderer
from merry.renderers.html import render_page as _render_page
from merry.report import render_diagnostic
from merry.resolve import Resolver
from merry.tokens import Token, TokenType
from merry.utils.logger import get_logger
from merry.visitor import iter_nodes, transform

__version__ = "0.1.0"

logger = get_logger(__name__)


def parse(source: str, *, source_file: str | None = None) -> Document:
    """Parse source text into a Document.

    Raises:
        LexError: Malformed or unterminated verbatim fence
        StructuralError: Invalid section structure
    """
    return Parser(source, source_file=source_file).parse()


def resolve(document: Document) -> Document:
    """Resolve every tag qualifier of ``document`` against its directives.

    Raises:
        SemanticError: Unresolved tag, unknown directive or bad arguments
    """
    return Resolver(document).resolve()


def execute(document: Document) -> Document:
    """Run the directives of a resolved ``document``.

    Raises:
        ExternalProcessError: A ``rewrite`` command failed
    """
    return Executor().execute(document)


def render(document: Document) -> str:
    """Render an executed ``document`` to an ``<article>`` HTML fragment."""
    return HtmlRenderer().render(document)


def render_page(
    document: Document, *, title: str | None = None, head: str | None = None
) -> str:
    """Render an executed ``document`` as a complete HTML page."""
    return _render_page(document, title=title, head=head)


def compile(source: str, *, source_file: str | None = None) -> str:
    """Compile source text to HTML using the active CompileConfig.

    Compilation stops at the first error; no partial output is produced.
    """
    return render(execute(resolve(parse(source, source_file=source_file))))


def compile_file(
    input_path: str | Path,
    output_path: str | Path,
    *,
    page: bool = False,
    title: str | None = None,
    head: str | None = None,
) -> None:
    """Compile ``input_path`` and write the HTML to ``output_path``.

    The output file is only opened once the HTML has been fully rendered, so
    a failed compilation never leaves a file behind.

    Args:
        input_path: Source file (UTF-8)
        output_path: Destination file
        page: Wrap the output in a full HTML page
        title: Page title (with ``page``)
        head: Extra ``<head>`` HTML (with ``page``)
    """
    input_path = Path(input_path)
    source = input_path.read_text(encoding="utf-8")
    document = execute(resolve(parse(source, source_file=str(input_path))))
    if page:
        html = render_page(document, title=title, head=head)
    else:
        html = render(document)
    Path(output_path).write_text(html, encoding="utf-8")
    logger.debug("Wrote %s (%d chars)", output_path, len(html))


class Merry:
    """High-level compiler bound to one CompileConfig.

    Usage:
        >>> merry = Merry(CompileConfig(indent_class="nested"))
        >>> html = merry("# Hello")

        >>> # Access the tree
        >>> merry.parse("# Heading").root.children[0].level
        1

    Thread Safety:
        Configuration is applied through a ContextVar for the duration of
        each call, so several Merry instances can be used concurrently from
        different threads.

    """

    __slots__ = ("_config",)

    def __init__(self, config: CompileConfig | None = None) -> None:
        self._config = config or CompileConfig()

    @property
    def config(self) -> CompileConfig:
        return self._config

    def __call__(self, source: str, *, source_file: str | None = None) -> str:
        """Compile ``source`` to an HTML fragment."""
        with compile_config_context(self._config):
            return compile(source, source_file=source_file)

    def parse(self, source: str, *, source_file: str | None = None) -> Document:
        with compile_config_context(self._config):
            return parse(source, source_file=source_file)

    def resolve(self, document: Document) -> Document:
        with compile_config_context(self._config):
            return resolve(document)

    def execute(self, document: Document) -> Document:
        with compile_config_context(self._config):
            return execute(document)

    def render(self, document: Document) -> str:
        with compile_config_context(self._config):
            return render(document)

    def render_page(
        self, document: Document, *, title: str | None = None, head: str | None = None
    ) -> str:
        with compile_config_context(self._config):
            return render_page(document, title=title, head=head)

    def compile_file(self, input_path: str | Path, output_path: str | Path, **options) -> None:
        """Compile a file using this instance's configuration."""
        with compile_config_context(self._config):
            compile_file(input_path, output_path, **options)


__all__ = [
    # High-level API
    "Merry",
    "compile",
    "compile_file",
    "execute",
    "parse",
    "render",
    "render_page",
    "resolve",
    "render_diagnostic",
    # Pipeline stages
    "Executor",
    "HtmlRenderer",
    "Lexer",
    "Parser",
    "Resolver",
    "tokenize",
    "iter_nodes",
    "transform",
    # Configuration
    "CompileConfig",
    "compile_config_context",
    "get_compile_config",
    "reset_compile_config",
    "set_compile_config",
    # Directives
    "DirectiveContext",
    "DirectiveHandler",
    "DirectiveKind",
    "DirectiveRegistry",
    "DirectiveRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    # Collaborators
    "AssetResolver",
    "DefaultAssetResolver",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    # Errors
    "ExternalProcessError",
    "LexError",
    "MerryError",
    "SemanticError",
    "StructuralError",
    # Tokens and locations
    "SourceSpan",
    "Token",
    "TokenType",
    # Nodes
    "Block",
    "Directive",
    "DirectiveDeclaration",
    "Document",
    "Embed",
    "Emphasis",
    "EmphasisKind",
    "HtmlBlock",
    "HtmlInline",
    "Inline",
    "InlineVerbatim",
    "Link",
    "List",
    "ListItem",
    "Node",
    "Paragraph",
    "QualifiedSpan",
    "Section",
    "SectionEntry",
    "Text",
    "Verbatim",
]
