"""Mode-specific scanners for the merry lexer.

Each scanner is a mixin that provides scanning logic for one lexer
mode (BLOCK, VERBATIM).
"""

from __future__ import annotations

from merry.lexer.scanners.block import BlockScannerMixin
from merry.lexer.scanners.verbatim import VerbatimScannerMixin

__all__ = ["BlockScannerMixin", "VerbatimScannerMixin"]
