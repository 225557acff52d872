"""Asset resolution collaborator used by the ``embed`` directive.

Usage:
    >>> DefaultAssetResolver().resolve("figures/cat.png")
    '<img src="figures/cat.png" alt="cat.png">'
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Protocol, runtime_checkable

from merry.utils.text import escape_attr

IMAGE_SUFFIXES = frozenset({".apng", ".avif", ".gif", ".jpeg", ".jpg", ".png", ".svg", ".webp"})


@runtime_checkable
class AssetResolver(Protocol):
    """Turns an ``embed`` path into an embeddable HTML reference."""

    def resolve(self, path: str) -> str:
        """Return the HTML that embeds ``path``."""
        ...


class DefaultAssetResolver:
    """Images become ``<img>``, anything else an ``<iframe>``.

    Args:
        base_url: Prefix joined to relative paths (empty keeps them relative)

    """

    __slots__ = ("base_url",)

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def resolve(self, path: str) -> str:
        url = path
        if self.base_url and "://" not in path and not path.startswith("/"):
            url = self.base_url.rstrip("/") + "/" + path
        pure = PurePosixPath(path)
        if pure.suffix.lower() in IMAGE_SUFFIXES:
            return f'<img src="{escape_attr(url)}" alt="{escape_attr(pure.name)}">'
        return f'<iframe src="{escape_attr(url)}"></iframe>'
