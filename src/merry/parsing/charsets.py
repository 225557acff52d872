"""Character sets for O(1) classification.

All sets are frozensets, cached at module level.

Usage:
    from merry.parsing.charsets import INLINE_SPECIAL

    if char in INLINE_SPECIAL:  # O(1) lookup
        ...
"""

# Characters that may open an inline construct
INLINE_SPECIAL: frozenset[str] = frozenset("~*_`[")

# Emphasis delimiters: ~ italic, * bold, _ underline
EMPHASIS_DELIMITERS: frozenset[str] = frozenset("~*_")

# Characters a tag qualifier may not contain
TAG_FORBIDDEN: frozenset[str] = frozenset(" \t\n{},")

# Separators between the tags of one qualifier: {a, b} or {a b}
TAG_SEPARATORS: frozenset[str] = frozenset(" \t,")

# Whitespace that separates directive arguments
ARGUMENT_WHITESPACE: frozenset[str] = frozenset(" \t")

BACKTICK = "`"
FENCE = "```"
LIST_MARKER = "--"
HEADING_CHAR = "#"
DIRECTIVE_CHAR = "|"


def is_valid_tag(tag: str) -> bool:
    """Check that ``tag`` is non-empty and free of whitespace, commas and braces.

    Examples:
        >>> is_valid_tag("wiki")
        True
        >>> is_valid_tag("two words")
        False
        >>> is_valid_tag("")
        False
    """
    if not tag:
        return False
    return not any(char in TAG_FORBIDDEN for char in tag)


def split_tags(text: str) -> list[tuple[str, int]] | None:
    """Split the inside of a ``{...}`` qualifier into tags.

    Tags are separated by spaces, tabs and commas. Returns (tag, offset)
    pairs with offsets relative to ``text``, or None when ``text`` holds no
    tag or contains a brace or newline.

    Examples:
        >>> split_tags("a, b")
        [('a', 0), ('b', 3)]
        >>> split_tags(" , ") is None
        True
    """
    if any(char in "{}\n" for char in text):
        return None
    tags: list[tuple[str, int]] = []
    start: int | None = None
    for pos, char in enumerate(text):
        if char in TAG_SEPARATORS:
            if start is not None:
                tags.append((text[start:pos], start))
                start = None
        elif start is None:
            start = pos
    if start is not None:
        tags.append((text[start:], start))
    return tags or None
