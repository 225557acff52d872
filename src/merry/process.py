"""External process collaborator used by the ``rewrite`` directive.

The ProcessRunner protocol lets callers substitute how commands run (a
sandbox, a cache, or a fake in tests). SubprocessRunner is the default.

Thread Safety:
SubprocessRunner holds no state beyond its timeout and is safe to share.

"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from merry.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of one external command.

    Attributes:
        stdout: Standard output, decoded as UTF-8
        returncode: Exit status
        stderr: Standard error, decoded as UTF-8

    """

    stdout: str
    returncode: int = 0
    stderr: str = ""


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs a command with ``stdin`` piped in and returns its output.

    Implementations raise ``OSError`` when the command cannot be started and
    ``subprocess.TimeoutExpired`` when it runs too long; the executor turns
    both into ExternalProcessError.
    """

    def run(self, command: Sequence[str], stdin: str) -> ProcessResult:
        """Run ``command`` to completion."""
        ...


class SubprocessRunner:
    """ProcessRunner backed by :func:`subprocess.run`.

    Args:
        timeout: Seconds before the child is killed (None waits forever)

    """

    __slots__ = ("timeout",)

    def __init__(self, timeout: float | None = 30.0) -> None:
        self.timeout = timeout

    def run(self, command: Sequence[str], stdin: str) -> ProcessResult:
        logger.debug("Running rewrite command: %s", " ".join(command))
        proc = subprocess.run(
            list(command),
            input=stdin,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=self.timeout,
            check=False,
        )
        return ProcessResult(
            stdout=proc.stdout or "",
            returncode=proc.returncode,
            stderr=proc.stderr or "",
        )

    def __repr__(self) -> str:
        return f"SubprocessRunner(timeout={self.timeout!r})"
