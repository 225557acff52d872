"""Heading classifier mixin."""

from merry.parsing.charsets import HEADING_CHAR
from merry.tokens import Token, TokenType


class HeadingClassifierMixin:
    """Mixin providing heading classification."""

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

    def _try_classify_heading(self, content: str, start: int, indent: int = 0) -> Token | None:
        """Try to classify content as a heading.

        A heading is any number of ``#`` followed by a space, a tab or the end
        of the line. There is no upper bound on the level; levels beyond six
        are rendered with ARIA roles.

        Args:
            content: Line content with surrounding whitespace stripped
            start: Offset of the first content character in the source
            indent: Leading columns of the line

        Returns:
            HEADING token (value is the title, possibly empty) or None.
        """
        level = 0
        while level < len(content) and content[level] == HEADING_CHAR:
            level += 1

        if level == 0:
            return None

        # "#tag" is text, not a heading
        if level < len(content) and content[level] not in " \t":
            return None

        title = content[level:].strip()
        return self._make_token(
            TokenType.HEADING, title, start, start + len(content), indent=indent, level=level
        )
