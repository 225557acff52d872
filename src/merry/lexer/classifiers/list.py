"""List marker classifier mixin."""

from merry.parsing.charsets import LIST_MARKER
from merry.tokens import Token, TokenType


class ListClassifierMixin:
    """Mixin providing list marker classification."""

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

    def _try_classify_list_marker(self, content: str, start: int, indent: int = 0) -> Token | None:
        """Try to classify content as a ``-- `` list marker.

        The item's content column is ``indent + 3``; the parser uses it to
        decide which following lines attach to the item.
        """
        if not content.startswith(LIST_MARKER):
            return None
        rest = content[len(LIST_MARKER) :]
        if rest and rest[0] not in " \t":
            return None
        return self._make_token(
            TokenType.LIST_MARKER, rest.lstrip(), start, start + len(content), indent=indent
        )
