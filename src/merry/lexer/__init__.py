"""Line-classifying lexer for merry source.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, LexerMode, tokenize
├── core.py              # Lexer class (mixin composition + navigation)
├── modes.py             # LexerMode enum
├── classifiers/         # Line classification mixins
│   ├── heading.py       # # headings
│   ├── fence.py         # ``` fences and section returns
│   ├── list.py          # -- list markers
│   └── directive.py     # | directives
└── scanners/            # Mode-specific scanners
    ├── block.py         # Block mode (main dispatch)
    └── verbatim.py      # Verbatim mode

Usage:
    >>> from merry.lexer import tokenize
    >>> [t.type.name for t in tokenize("-- item")]
    ['LIST_MARKER', 'EOF']

"""

from collections.abc import Iterator

from merry.lexer.core import Lexer
from merry.lexer.modes import LexerMode
from merry.tokens import Token
from merry.utils.text import normalize_newlines


def tokenize(source: str, source_file: str | None = None) -> Iterator[Token]:
    """Normalize line endings and tokenize ``source``."""
    return Lexer(normalize_newlines(source), source_file).tokenize()


__all__ = ["Lexer", "LexerMode", "tokenize"]
