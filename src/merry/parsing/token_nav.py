"""Token navigation utilities for the merry parser.

Provides a mixin for token stream navigation and lookahead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from merry.tokens import Token, TokenType

if TYPE_CHECKING:
    from collections.abc import Sequence


class TokenNavigationMixin:
    """Mixin providing token stream navigation methods.

    Required Host Attributes:
        - _tokens: Sequence[Token]
        - _tokens_len: int (cached len(_tokens))
        - _pos: int
        - _current: Token | None

    """

    _tokens: Sequence[Token]
    _tokens_len: int
    _pos: int
    _current: Token | None

    def _at_end(self) -> bool:
        """Check if at end of token stream."""
        return self._current is None or self._current.type == TokenType.EOF

    def _advance(self) -> Token | None:
        """Advance to next token and return it."""
        self._pos += 1
        if self._pos < self._tokens_len:
            self._current = self._tokens[self._pos]
        else:
            self._current = None
        return self._current

    def _peek(self, offset: int = 1) -> Token | None:
        """Peek at token at offset from current position."""
        pos = self._pos + offset
        if pos < self._tokens_len:
            return self._tokens[pos]
        return None

    def _count_blank_lines(self) -> int:
        """Count consecutive BLANK_LINE tokens starting at the current token."""
        count = 0
        while True:
            token = self._peek(count)
            if token is None or token.type != TokenType.BLANK_LINE:
                return count
            count += 1

    def _skip_blank_lines(self, count: int) -> Token | None:
        """Advance past ``count`` blank lines and return the new current token."""
        for _ in range(count):
            self._advance()
        return self._current
