"""StringBuilder for O(n) HTML accumulation.

Appends to a list and joins once at the end, instead of repeated string
concatenation. Includes small helpers for writing tags with escaped
attributes.

Thread Safety:
StringBuilder instances are local to each render() call.

"""

from __future__ import annotations

from merry.utils.text import escape_attr


class StringBuilder:
    """Efficient string accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.open_tag("section", id="intro", class_="indented").append("Hi")
            StringBuilder(3 parts)
            >>> sb.close_tag("section").build()
            '<section id="intro" class="indented">Hi</section>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a string (empty strings are skipped)."""
        if s:
            self._parts.append(s)
        return self

    def append_line(self, s: str = "") -> StringBuilder:
        """Append a string followed by a newline."""
        if s:
            self._parts.append(s)
        self._parts.append("\n")
        return self

    def open_tag(self, name: str, **attrs: str | None) -> StringBuilder:
        """Append ``<name attr="value"...>``.

        Attributes whose value is None are omitted. A trailing underscore is
        dropped from attribute names (``class_`` becomes ``class``) and other
        underscores become hyphens (``aria_level`` becomes ``aria-level``).
        """
        parts = [name]
        for key, value in attrs.items():
            if value is None:
                continue
            attr = key.rstrip("_").replace("_", "-")
            parts.append(f'{attr}="{escape_attr(value)}"')
        self._parts.append(f"<{' '.join(parts)}>")
        return self

    def close_tag(self, name: str) -> StringBuilder:
        """Append ``</name>``."""
        self._parts.append(f"</{name}>")
        return self

    def build(self) -> str:
        """Join all parts into the final string."""
        return "".join(self._parts)

    def __len__(self) -> int:
        """Return number of parts (not total length)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)

    def __repr__(self) -> str:
        return f"StringBuilder({len(self._parts)} parts)"
