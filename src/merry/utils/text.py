"""Text processing utilities for merry.

Example:
    >>> from merry.utils.text import slugify
    >>> slugify("Is This It")
    'is-this-it'
"""

from __future__ import annotations

import html as html_module
import re

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[-\s]+")


def normalize_newlines(source: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``.

    The lexer only understands single-character line breaks, so every
    source is normalized once at ingestion.

    Examples:
        >>> normalize_newlines("a\\r\\nb\\rc")
        'a\\nb\\nc'
    """
    if "\r" not in source:
        return source
    return source.replace("\r\n", "\n").replace("\r", "\n")


def slugify(text: str, separator: str = "-") -> str:
    """Convert heading text to a URL-safe fragment identifier.

    Unicode word characters are preserved.

    Examples:
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("Café au lait")
        'café-au-lait'
    """
    if not text:
        return ""
    text = text.lower().strip()
    text = _NON_WORD.sub("", text)
    text = _SEPARATORS.sub(separator, text)
    return text.strip(separator)


def escape_text(text: str) -> str:
    """Escape text content (``&``, ``<``, ``>``) for HTML element bodies."""
    return html_module.escape(text, quote=False)


def escape_attr(text: str) -> str:
    """Escape a value for use inside a double-quoted HTML attribute.

    Examples:
        >>> escape_attr('a "b" & <c>')
        'a &quot;b&quot; &amp; &lt;c&gt;'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=True).replace("&#x27;", "'")
