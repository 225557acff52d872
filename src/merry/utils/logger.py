"""Minimal logging utilities for merry.

Example:
    >>> from merry.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Parsing document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a standard library logger under the ``merry.`` namespace.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("pipeline").name
        'merry.pipeline'
        >>> get_logger("merry.lexer").name
        'merry.lexer'
    """
    if not (name == "merry" or name.startswith("merry.")):
        name = f"merry.{name}"
    return logging.getLogger(name)
