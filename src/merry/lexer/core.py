"""Line-classifying lexer with O(n) guaranteed performance.

Implements a window-based approach: find the line end, classify the line,
then commit. Every physical line yields exactly one token, so positions
never rewind.

No regex in the hot path.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterator

from merry.errors import LexError
from merry.lexer.classifiers import (
    DirectiveClassifierMixin,
    FenceClassifierMixin,
    HeadingClassifierMixin,
    ListClassifierMixin,
)
from merry.lexer.modes import LexerMode
from merry.lexer.scanners import BlockScannerMixin, VerbatimScannerMixin
from merry.location import SourceSpan
from merry.tokens import Token, TokenType
from merry.utils.logger import get_logger

logger = get_logger(__name__)


class Lexer(
    # Classifiers (pure logic, no position mutation)
    FenceClassifierMixin,
    HeadingClassifierMixin,
    ListClassifierMixin,
    DirectiveClassifierMixin,
    # Scanners (mode-specific scanning logic)
    BlockScannerMixin,
    VerbatimScannerMixin,
):
    """Line-classifying lexer.

    Usage:
            >>> lexer = Lexer("# Hello\\n\\nWorld")
            >>> for token in lexer.tokenize():
            ...     print(token)
        Token(HEADING, 'Hello', 1:1)
        Token(BLANK_LINE, '', 2:1)
        Token(TEXT_LINE, 'World', 3:1)
        Token(EOF, '', 3:6)

    The source must already have normalized line endings.

    """

    __slots__ = (
        "_source",
        "_source_len",  # Cached len(source)
        "_pos",
        "_lineno",
        "_line_start",  # Offset of the first character of the current line
        "_mode",
        "_source_file",
        "_fence_indent",  # Indent of the opening fence, stripped from content
        "_fence_token",  # Opening fence, for unterminated-verbatim errors
    )

    def __init__(self, source: str, source_file: str | None = None) -> None:
        """Initialize lexer with source text.

        Args:
            source: Normalized source text
            source_file: Optional source file path for error messages
        """
        self._source = source
        self._source_len = len(source)
        self._pos = 0
        self._lineno = 1
        self._line_start = 0
        self._mode = LexerMode.BLOCK
        self._source_file = source_file

        self._fence_indent: int = 0
        self._fence_token: Token | None = None

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into a token stream.

        Yields:
            Token objects one at a time, ending with EOF.

        Raises:
            LexError: Malformed fence, or a verbatim block still open at EOF.
        """
        source_len = self._source_len
        while self._pos < source_len:
            yield from self._dispatch_mode()

        if self._mode == LexerMode.VERBATIM:
            location = self._fence_token.location if self._fence_token else None
            raise LexError("verbatim block is never closed (expected ```)", location)

        logger.debug("Lexed %d line(s) from %s", self._lineno, self._source_file or "<string>")
        yield self._make_token(TokenType.EOF, "", self._pos, self._pos)

    def _dispatch_mode(self) -> Iterator[Token]:
        """Dispatch to appropriate scanner based on current mode."""
        if self._mode == LexerMode.BLOCK:
            yield from self._scan_block()
        elif self._mode == LexerMode.VERBATIM:
            yield from self._scan_verbatim_content()

    # =========================================================================
    # Window navigation helpers
    # =========================================================================

    def _find_line_end(self) -> int:
        """Find the end of the current line (position of \\n or EOF)."""
        idx = self._source.find("\n", self._pos)
        return idx if idx != -1 else self._source_len

    def _calc_indent(self, line: str) -> tuple[int, int]:
        """Calculate indent level and content start position.

        Spaces count as 1, tabs expand to next multiple of 4.

        Returns:
            (indent_columns, content_start_index)
        """
        indent = 0
        pos = 0
        line_len = len(line)
        while pos < line_len:
            char = line[pos]
            if char == " ":
                indent += 1
                pos += 1
            elif char == "\t":
                indent += 4 - (indent % 4)
                pos += 1
            else:
                break
        return indent, pos

    def _chars_for_indent(self, line: str, target_indent: int) -> int:
        """Calculate how many characters to skip to consume target_indent columns."""
        col = 0
        pos = 0
        while pos < len(line) and col < target_indent:
            char = line[pos]
            if char == " ":
                col += 1
                pos += 1
            elif char == "\t":
                col += 4 - (col % 4)
                pos += 1
            else:
                break
        return pos

    def _commit_to(self, line_end: int) -> None:
        """Commit position to line_end, consuming the newline if present."""
        self._pos = line_end
        if self._pos < self._source_len and self._source[self._pos] == "\n":
            self._pos += 1
            self._lineno += 1
            self._line_start = self._pos

    # =========================================================================
    # Location tracking
    # =========================================================================

    def _span(self, start: int, end: int) -> SourceSpan:
        """Create a span between two offsets on the current line."""
        return SourceSpan(
            lineno=self._lineno,
            col_offset=start - self._line_start + 1,
            offset=start,
            end_offset=end,
            end_lineno=self._lineno,
            end_col_offset=end - self._line_start + 1,
            source_file=self._source_file,
        )

    def _make_token(
        self,
        token_type: TokenType,
        value: str,
        start: int,
        end: int,
        *,
        indent: int = 0,
        level: int = 0,
        tags: list[tuple[str, int]] | None = None,
    ) -> Token:
        """Create a Token on the current line.

        ``tags`` holds (tag, absolute offset) pairs. Must be called before the
        line is committed.
        """
        tags = tags or []
        return Token(
            type=token_type,
            value=value,
            location=self._span(start, end),
            indent=indent,
            level=level,
            tags=tuple(tag for tag, _ in tags),
            tag_locations=tuple(self._span(offset, offset + len(tag)) for tag, offset in tags),
        )
