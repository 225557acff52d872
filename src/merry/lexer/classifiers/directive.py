"""Directive line classifier mixin."""

from merry.parsing.charsets import DIRECTIVE_CHAR
from merry.tokens import Token, TokenType


class DirectiveClassifierMixin:
    """Mixin providing directive line classification."""

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
        """Create token on the current line. Implemented by Lexer."""
        raise NotImplementedError

    def _try_classify_directive(self, content: str, start: int, indent: int = 0) -> Token | None:
        """Try to classify content as ``| name args...``.

        The token value is everything after the bar; the parser splits it.
        """
        if not content.startswith(DIRECTIVE_CHAR):
            return None
        return self._make_token(
            TokenType.DIRECTIVE,
            content[len(DIRECTIVE_CHAR) :].lstrip(),
            start,
            start + len(content),
            indent=indent,
        )
