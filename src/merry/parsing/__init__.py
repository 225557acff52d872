"""Parsing subsystem for merry.

Provides the mixins the Parser is composed of:
- TokenNavigationMixin: Token stream traversal
- InlineParsingMixin: Emphasis, qualified spans, inline verbatims
- BlockParsingMixin: Paragraphs, lists, verbatim blocks, directives

Plus SectionStack, which turns heading levels into the section tree.
"""

from merry.parsing.blocks import BlockParsingMixin
from merry.parsing.inline import InlineParsingMixin
from merry.parsing.sections import SectionStack
from merry.parsing.token_nav import TokenNavigationMixin

__all__ = [
    "BlockParsingMixin",
    "InlineParsingMixin",
    "SectionStack",
    "TokenNavigationMixin",
]
