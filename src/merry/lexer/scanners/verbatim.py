"""Verbatim mode scanner mixin."""

from collections.abc import Iterator

from merry.lexer.modes import LexerMode
from merry.tokens import Token, TokenType


class VerbatimScannerMixin:
    """Mixin providing verbatim mode scanning logic.

    Every line is captured raw until the closing fence. The opening fence's
    indentation is stripped from each captured line.

    """

    # These will be set by the Lexer class
    _source: str
    _pos: int
    _mode: LexerMode
    _fence_indent: int
    _fence_token: Token | None

    def _find_line_end(self) -> int:
        """Find end of current line."""
        raise NotImplementedError

    def _calc_indent(self, line: str) -> tuple[int, int]:
        """Calculate indent level and content start position."""
        raise NotImplementedError

    def _chars_for_indent(self, line: str, target_indent: int) -> int:
        """Characters to skip to consume target_indent columns."""
        raise NotImplementedError

    def _commit_to(self, line_end: int) -> None:
        """Commit position to line_end."""
        raise NotImplementedError

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
        raise NotImplementedError

    def _try_classify_fence_close(self, content: str, start: int, indent: int = 0) -> Token | None:
        """Implemented by FenceClassifierMixin."""
        raise NotImplementedError

    def _scan_verbatim_content(self) -> Iterator[Token]:
        """Scan one line inside a verbatim block.

        Yields:
            VERBATIM_LINE for content, or FENCE_CLOSE (returning to BLOCK mode).
        """
        line_start = self._pos
        line_end = self._find_line_end()
        line = self._source[line_start:line_end]

        indent, content_start = self._calc_indent(line)
        content = line[content_start:].rstrip()

        token = self._try_classify_fence_close(content, line_start + content_start, indent)
        if token is not None:
            self._mode = LexerMode.BLOCK
            self._fence_token = None
        else:
            skip = self._chars_for_indent(line, self._fence_indent)
            token = self._make_token(
                TokenType.VERBATIM_LINE, line[skip:], line_start, line_end, indent=indent
            )

        self._commit_to(line_end)
        yield token
