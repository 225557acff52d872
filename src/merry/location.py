"""Source span tracking for diagnostics.

Every token and node produced by merry carries a SourceSpan so that any
stage can point back at the exact text that caused an error.

Thread Safety:
SourceSpan is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """A range of characters in the normalized source text.

    Offsets index into the source after newline normalization. Line and
    column numbers are 1-indexed; ``end_col_offset`` is exclusive.

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column (1-indexed)
        offset: Absolute start offset in the source
        end_offset: Absolute end offset in the source (exclusive)
        end_lineno: Ending line number
        end_col_offset: Ending column (exclusive)
        source_file: Source file path (optional)

    Examples:
            >>> span = SourceSpan(lineno=3, col_offset=1, offset=20, end_offset=23)
            >>> str(span)
            '3:1'
            >>> SourceSpan(1, 5, source_file="guide.md2").source_file
            'guide.md2'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    end_lineno: int | None = None
    end_col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format as ``file:line:col`` or ``line:col``."""
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @property
    def last_lineno(self) -> int:
        """Line on which the span ends (the start line for one-line spans)."""
        return self.end_lineno if self.end_lineno is not None else self.lineno

    def span_to(self, end: SourceSpan) -> SourceSpan:
        """Create a span running from the start of this span to the end of ``end``."""
        return SourceSpan(
            lineno=self.lineno,
            col_offset=self.col_offset,
            offset=self.offset,
            end_offset=end.end_offset or end.offset,
            end_lineno=end.end_lineno or end.lineno,
            end_col_offset=end.end_col_offset or end.col_offset,
            source_file=self.source_file,
        )

    @classmethod
    def unknown(cls) -> SourceSpan:
        """Placeholder span for synthetic nodes (such as the document root)."""
        return cls(lineno=0, col_offset=0)
