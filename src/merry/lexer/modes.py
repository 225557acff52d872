"""Lexer operating modes."""

from __future__ import annotations

from enum import Enum, auto


class LexerMode(Enum):
    """Lexer operating modes.

    The lexer switches between modes based on context:
    - BLOCK: Between blocks, classifying each line
    - VERBATIM: Inside a fenced verbatim block, capturing lines raw

    """

    BLOCK = auto()  # Between blocks
    VERBATIM = auto()  # Inside ``` ... ```
