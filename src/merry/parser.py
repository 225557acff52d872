"""Section-tree builder producing a typed Document.

Consumes the token stream from the Lexer and builds frozen nodes. Heading
levels drive a stack of open sections; every other block attaches to the
innermost open section.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `TokenNavigationMixin`: Token stream traversal
- `InlineParsingMixin`: Inline content (emphasis, qualified spans, verbatims)
- `BlockParsingMixin`: Block-level content (paragraphs, lists, verbatim, directives)

Thread Safety:
- Parser produces an immutable Document (frozen dataclasses)
- Safe to share the Document across threads

"""

from __future__ import annotations

from merry.lexer import Lexer
from merry.nodes import DeclarationKey, DirectiveDeclaration, Document
from merry.parsing import (
    BlockParsingMixin,
    InlineParsingMixin,
    SectionStack,
    TokenNavigationMixin,
)
from merry.tokens import Token, TokenType
from merry.utils.logger import get_logger
from merry.utils.text import normalize_newlines

logger = get_logger(__name__)


class Parser(
    TokenNavigationMixin,
    InlineParsingMixin,
    BlockParsingMixin,
):
    """Builds the section tree for one source document.

    Usage:
            >>> doc = Parser("# Hello\\n\\nWorld").parse()
            >>> doc.root.children[0].level
            1

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. The resulting Document is immutable.

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_tokens",
        "_tokens_len",
        "_pos",
        "_current",
        "_sections",
        "_declarations",
    )

    def __init__(self, source: str, source_file: str | None = None) -> None:
        """Initialize parser with source text.

        Args:
            source: Source text (line endings are normalized here)
            source_file: Optional source file path for error messages

        """
        self._source = normalize_newlines(source)
        self._source_file = source_file
        self._tokens: list[Token] = []
        self._tokens_len = 0
        self._pos = 0
        self._current: Token | None = None
        self._sections = SectionStack()
        self._declarations: dict[DeclarationKey, list[DirectiveDeclaration]] = {}

    def parse(self) -> Document:
        """Parse source into a Document.

        Raises:
            LexError: Malformed or unterminated verbatim fence.
            StructuralError: Invalid heading nesting or misplaced heading.
        """
        lexer = Lexer(self._source, self._source_file)
        self._tokens = list(lexer.tokenize())
        self._tokens_len = len(self._tokens)
        self._pos = 0
        self._current = self._tokens[0] if self._tokens else None

        while not self._at_end():
            token = self._current
            assert token is not None
            match token.type:
                case TokenType.BLANK_LINE:
                    self._advance()
                case TokenType.HEADING:
                    self._parse_heading()
                case TokenType.SECTION_RETURN:
                    self._parse_section_return()
                case _:
                    block = self._parse_block()
                    if block is not None:
                        self._sections.add(block)

        root, outline = self._sections.close_all()
        declarations = {key: tuple(decls) for key, decls in self._declarations.items()}
        logger.debug(
            "Parsed %d section(s) and %d directive(s) from %s",
            len(outline) - 1,
            sum(len(decls) for decls in declarations.values()),
            self._source_file or "<string>",
        )
        return Document(
            root=root,
            outline=outline,
            declarations=declarations,
            source=self._source,
            source_file=self._source_file,
        )
