"""Diagnostic reporter.

Formats a MerryError as an annotated quote of the source:

    error: semantic error
     --> guide.md2:3:16
      |
    3 | See [the docs]{docs}.
      |                ^^^^
      = unresolved tag 'docs': no directive declares it

Example:
    >>> from merry.errors import SemanticError
    >>> from merry.location import SourceSpan
    >>> err = SemanticError("unknown directive 'x'", SourceSpan(1, 1, 0, 3, 1, 4))
    >>> print(render_diagnostic(err, "| x"))
    error: semantic error
     --> 1:1
      |
    1 | | x
      | ^^^
      = unknown directive 'x'

"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from merry.errors import MerryError
    from merry.location import SourceSpan

_RED = "\033[1;31m"
_BLUE = "\033[1;34m"
_BOLD = "\033[1m"
_RESET = "\033[0m"

DEFAULT_MAX_LINES = 6


def render_diagnostic(
    error: MerryError,
    source: str,
    *,
    color: bool = False,
    context: int = 0,
    max_lines: int = DEFAULT_MAX_LINES,
) -> str:
    """Render ``error`` as an annotated source quote.

    Args:
        error: The error to report
        source: Normalized source text the error's span indexes into
        color: Emit ANSI colour codes
        context: Extra lines quoted above the span
        max_lines: Longest span quoted in full; longer spans are truncated

    Returns:
        The report, without a trailing newline.
    """

    def paint(text: str, code: str) -> str:
        return f"{code}{text}{_RESET}" if color else text

    header = paint("error", _RED) + paint(f": {error.title}", _BOLD)
    location = error.location
    if location is None or location.lineno <= 0:
        return f"{header}\n{paint('=', _BLUE)} {error.message}"

    lines = source.split("\n")
    first = location.lineno
    last = min(location.last_lineno, len(lines))
    shown_last = min(last, first + max_lines - 1)
    start = max(1, first - context)
    width = len(str(shown_last))
    pad = " " * width

    out = [header, f"{pad}{paint('-->', _BLUE)} {location}", f"{pad} {paint('|', _BLUE)}"]
    for lineno in range(start, shown_last + 1):
        text = lines[lineno - 1] if lineno <= len(lines) else ""
        gutter = paint(f"{lineno:>{width}} |", _BLUE)
        out.append(f"{gutter} {text}".rstrip())
        if lineno < first:
            continue
        underline = _underline(text, lineno, location)
        if underline:
            out.append(f"{pad} {paint('|', _BLUE)} {paint(underline, _RED)}")

    if shown_last < last:
        hidden = last - shown_last
        out.append(f"{pad} {paint('|', _BLUE)} ... and {hidden} more line(s)...")
    out.append(f"{pad} {paint('=', _BLUE)} {error.message}")
    return "\n".join(out)


def _underline(text: str, lineno: int, location: SourceSpan) -> str:
    """Caret underline for the part of ``text`` that ``location`` covers."""
    begin = location.col_offset - 1 if lineno == location.lineno else 0
    if lineno == location.last_lineno and location.end_col_offset is not None:
        end = location.end_col_offset - 1
    elif lineno == location.last_lineno:
        end = begin + 1
    else:
        end = len(text)

    if lineno != location.lineno:
        # Continuation lines: skip indentation
        begin = len(text) - len(text.lstrip())
    end = max(end, begin + 1)

    # Keep tabs so the carets line up with the quoted text
    prefix = "".join(ch if ch == "\t" else " " for ch in text[:begin])
    return prefix + "^" * (end - begin)


def format_error(error: MerryError, source: str | None = None, **options: object) -> str:
    """Full report when the source is known, otherwise ``str(error)``."""
    if source is None:
        return str(error)
    return render_diagnostic(error, source, **options)  # type: ignore[arg-type]
