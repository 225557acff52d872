"""Exception classes for merry.

Every compilation failure is fatal for the current document. Each exception
carries the SourceSpan of the offending text so the diagnostic reporter can
quote it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from merry.location import SourceSpan


class MerryError(Exception):
    """Base exception for all merry errors.

    Attributes:
        message: Human-readable description
        location: Span of the offending source text (optional)
        title: Short heading used by the diagnostic reporter
    """

    title: ClassVar[str] = "compilation failed"

    def __init__(self, message: str, location: SourceSpan | None = None) -> None:
        """Initialize error with an optional source span.

        Args:
            message: Error description
            location: Span of the offending text
        """
        self.message = message
        self.location = location

        prefix = ""
        if location is not None and location.lineno > 0:
            prefix = f"{location} "
        super().__init__(f"{prefix}{message}")


class LexError(MerryError):
    """Malformed or unterminated verbatim fence.

    Raised by the lexer; there is no way to continue scanning the document.
    """

    title = "malformed verbatim fence"


class StructuralError(MerryError):
    """Invalid document structure.

    Raised by the section-tree builder for skipped heading levels, section
    returns without a matching ancestor, and misplaced or empty headings.
    """

    title = "invalid document structure"


class SemanticError(MerryError):
    """Meaning of the document cannot be established.

    Raised for unresolved tag qualifiers, unknown directives and malformed
    directive arguments.
    """

    title = "semantic error"

    def __init__(
        self,
        message: str,
        location: SourceSpan | None = None,
        *,
        tag: str | None = None,
        directive_name: str | None = None,
    ) -> None:
        """Initialize semantic error.

        Args:
            message: Error description
            location: Span of the usage site or directive line
            tag: Tag qualifier involved, when the error concerns one
            directive_name: Directive involved, when the error concerns one
        """
        self.tag = tag
        self.directive_name = directive_name
        super().__init__(message, location)


class ExternalProcessError(MerryError):
    """An external rewrite command failed.

    Raised when the command cannot be spawned, exits non-zero, times out,
    or fails while its streams are being piped.
    """

    title = "external process failed"

    def __init__(
        self,
        message: str,
        location: SourceSpan | None = None,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        """Initialize external process error.

        Args:
            message: Error description
            location: Span of the ``rewrite`` directive line
            command: The argv that was run
            returncode: Exit status, if the process ran to completion
            stderr: Captured standard error (decoded, may be empty)
        """
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, location)
