"""Block parsing subsystem for merry.

Provides mixins for parsing block-level content:
- Paragraphs, verbatim blocks, headings and section returns
- Lists
- Directives

Architecture:
Block parsing is split into logical modules:
- core: Block dispatch and basic blocks
- list: List parsing with content-column attachment
- directive: Directive lines and declaration bookkeeping

"""

from merry.parsing.blocks.core import BlockParsingCoreMixin
from merry.parsing.blocks.directive import DirectiveParsingMixin, split_arguments
from merry.parsing.blocks.list import ListParsingMixin


class BlockParsingMixin(
    BlockParsingCoreMixin,
    ListParsingMixin,
    DirectiveParsingMixin,
):
    """Combined block parsing mixin.

    Combines all block parsing functionality into a single mixin
    that can be inherited by the Parser class.

    Required Host Attributes:
        - _current: Token | None
        - _sections: SectionStack
        - _declarations: dict[DeclarationKey, list[DirectiveDeclaration]]
        - _source_file: str | None

    Required Host Methods:
        - _at_end() -> bool
        - _advance() -> Token | None
        - _parse_inline(source_map) -> tuple[Inline, ...]

    """


__all__ = [
    "BlockParsingCoreMixin",
    "BlockParsingMixin",
    "DirectiveParsingMixin",
    "ListParsingMixin",
    "split_arguments",
]
