"""Utility modules for merry.

Provides:
- text: newline normalization, slugify and HTML escaping
- logger: get_logger for logging
"""

from merry.utils.logger import get_logger
from merry.utils.text import escape_attr, escape_text, normalize_newlines, slugify

__all__ = [
    "escape_attr",
    "escape_text",
    "get_logger",
    "normalize_newlines",
    "slugify",
]
