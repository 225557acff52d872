"""Block mode scanner mixin."""

from __future__ import annotations

from collections.abc import Iterator

from merry.tokens import Token, TokenType


class BlockScannerMixin:
    """Mixin providing block mode scanning logic.

    Scans one line at a time using the window approach:
    1. Find end of current line (window)
    2. Classify the line content (pure logic)
    3. Emit token and commit position (always advances)

    """

    # These will be set by the Lexer class
    _source: str
    _pos: int

    def _find_line_end(self) -> int:
        """Find end of current line."""
        raise NotImplementedError

    def _calc_indent(self, line: str) -> tuple[int, int]:
        """Calculate indent level and content start position."""
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

    # Classifier methods (provided by classifier mixins)
    def _try_classify_backticks(self, content: str, start: int, indent: int = 0) -> Token | None:
        raise NotImplementedError

    def _try_classify_heading(self, content: str, start: int, indent: int = 0) -> Token | None:
        raise NotImplementedError

    def _try_classify_list_marker(self, content: str, start: int, indent: int = 0) -> Token | None:
        raise NotImplementedError

    def _try_classify_directive(self, content: str, start: int, indent: int = 0) -> Token | None:
        raise NotImplementedError

    def _scan_block(self) -> Iterator[Token]:
        """Classify the current line in block mode.

        Yields:
            Exactly one token for the line.
        """
        line_start = self._pos
        line_end = self._find_line_end()
        line = self._source[line_start:line_end]

        indent, content_start = self._calc_indent(line)
        content = line[content_start:].rstrip()
        start = line_start + content_start

        if not content:
            token = self._make_token(TokenType.BLANK_LINE, "", line_start, line_end)
        else:
            token = (
                self._try_classify_backticks(content, start, indent)
                or self._try_classify_heading(content, start, indent)
                or self._try_classify_list_marker(content, start, indent)
                or self._try_classify_directive(content, start, indent)
                or self._make_token(
                    TokenType.TEXT_LINE, content, start, start + len(content), indent=indent
                )
            )

        self._commit_to(line_end)
        yield token
