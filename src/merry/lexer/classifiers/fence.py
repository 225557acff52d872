"""Backtick-run classifier mixin.

A run of backticks on its own line is either a verbatim fence (exactly three)
or a section return (any other count). Three backticks always mean a fence.
"""

from merry.errors import LexError
from merry.lexer.modes import LexerMode
from merry.location import SourceSpan
from merry.parsing.charsets import BACKTICK, FENCE, split_tags
from merry.tokens import Token, TokenType


class FenceClassifierMixin:
    """Mixin providing fence and section-return classification."""

    # These will be set by the Lexer class
    _mode: LexerMode
    _fence_indent: int
    _fence_token: Token | None

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

    def _span(self, start: int, end: int) -> SourceSpan:
        """Span on the current line. Implemented by Lexer."""
        raise NotImplementedError

    def _try_classify_backticks(self, content: str, start: int, indent: int = 0) -> Token | None:
        """Try to classify a line that starts with backticks (block mode).

        Returns:
            FENCE_OPEN (and switches to VERBATIM mode), SECTION_RETURN, or None
            when the line is ordinary text such as an inline verbatim.

        Raises:
            LexError: Three backticks followed by anything else.
        """
        if not content.startswith(BACKTICK):
            return None

        count = 0
        while count < len(content) and content[count] == BACKTICK:
            count += 1
        rest = content[count:]

        if not rest:
            end = start + count
            if count == len(FENCE):
                token = self._make_token(TokenType.FENCE_OPEN, "", start, end, indent=indent)
                self._mode = LexerMode.VERBATIM
                self._fence_indent = indent
                self._fence_token = token
                return token
            return self._make_token(
                TokenType.SECTION_RETURN, "", start, end, indent=indent, level=count
            )

        if count != len(FENCE):
            return None

        span = self._span(start, start + len(content))
        if rest.startswith("{"):
            raise LexError(
                "a tag qualifier may only follow a closing fence; "
                "this fence opens a verbatim block",
                span,
            )
        raise LexError("an opening fence must be alone on its line", span)

    def _try_classify_fence_close(self, content: str, start: int, indent: int = 0) -> Token | None:
        """Try to classify a line inside a verbatim block as its closing fence.

        Lines of four or more backticks are verbatim content.

        Returns:
            FENCE_CLOSE token (with ``tags`` for ```{tag} or ```{a, b}) or None.

        Raises:
            LexError: Three backticks followed by anything but ``{tag}``.
        """
        if not content.startswith(FENCE) or content.startswith(FENCE + BACKTICK):
            return None

        rest = content[len(FENCE) :]
        end = start + len(content)
        if not rest:
            return self._make_token(TokenType.FENCE_CLOSE, "", start, end, indent=indent)

        if rest.startswith("{") and rest.endswith("}"):
            tags = split_tags(rest[1:-1])
            if tags is not None:
                inner = start + len(FENCE) + 1
                return self._make_token(
                    TokenType.FENCE_CLOSE,
                    "",
                    start,
                    end,
                    indent=indent,
                    tags=[(tag, inner + offset) for tag, offset in tags],
                )

        raise LexError(
            "malformed closing fence: expected ``` or ```{tag} "
            "(tags are separated by spaces or commas and contain no braces)",
            self._span(start, end),
        )
