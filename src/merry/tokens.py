"""Token and TokenType definitions for the merry lexer.

The lexer classifies every physical line of the source into exactly one
Token. The section-tree builder consumes the resulting stream linearly.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass
from enum import Enum, auto

from merry.location import SourceSpan


class TokenType(Enum):
    """Line-level token types produced by the lexer."""

    # Document structure
    EOF = auto()
    BLANK_LINE = auto()

    # Sectioning
    HEADING = auto()  # ## Title
    SECTION_RETURN = auto()  # `` (N backticks, N != 3)

    # Block content
    TEXT_LINE = auto()
    LIST_MARKER = auto()  # -- item
    DIRECTIVE = auto()  # | name args...

    # Verbatim blocks
    FENCE_OPEN = auto()  # ```
    FENCE_CLOSE = auto()  # ``` or ```{tag}
    VERBATIM_LINE = auto()  # raw line between fences


@dataclass(frozen=True, slots=True)
class Token:
    """A single classified line.

    Attributes:
        type: The token type
        value: Payload text. For HEADING the title, for LIST_MARKER the text
            after the marker, for DIRECTIVE the text after ``|``, for
            VERBATIM_LINE the raw line, for TEXT_LINE the stripped line.
        location: Span of the line content (leading indent and trailing
            whitespace excluded, except for VERBATIM_LINE which spans the
            whole raw line). ``value`` is always a suffix of this text, so
            ``location.end_offset - len(value)`` is where the payload starts.
        indent: Leading columns of the line (tabs expand to 4)
        level: Heading level or section-return target level, 0 otherwise
        tags: Qualifier tags on a closing fence, in written order
        tag_locations: Span of each tag on a closing fence

    """

    type: TokenType
    value: str
    location: SourceSpan
    indent: int = 0
    level: int = 0
    tags: tuple[str, ...] = ()
    tag_locations: tuple[SourceSpan, ...] = ()

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.lineno}:{self.col})"

    @property
    def lineno(self) -> int:
        """Line number (convenience accessor)."""
        return self.location.lineno

    @property
    def col(self) -> int:
        """Column offset (convenience accessor)."""
        return self.location.col_offset
