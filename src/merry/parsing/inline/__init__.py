"""Inline parsing for merry.

Provides:
- InlineParsingMixin: parser mixin for text-bearing leaves
- InlineScanner: the recursive-descent scanner
- SourceMap: joined-text to source offset mapping
- parse_inline: convenience entry point for one line of text
"""

from merry.parsing.inline.core import InlineParsingMixin, InlineScanner, parse_inline
from merry.parsing.inline.source_map import SourceMap

__all__ = ["InlineParsingMixin", "InlineScanner", "SourceMap", "parse_inline"]
