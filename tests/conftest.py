"""Shared fixtures: fake collaborators for directives."""

from collections.abc import Sequence

import pytest

from merry.process import ProcessResult


class RecordingRunner:
    """ProcessRunner that records calls and returns a canned result."""

    def __init__(
        self,
        stdout: str = "<b>ok</b>",
        returncode: int = 0,
        stderr: str = "",
        error: Exception | None = None,
    ) -> None:
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.error = error
        self.calls: list[tuple[tuple[str, ...], str]] = []

    def run(self, command: Sequence[str], stdin: str) -> ProcessResult:
        self.calls.append((tuple(command), stdin))
        if self.error is not None:
            raise self.error
        return ProcessResult(stdout=self.stdout, returncode=self.returncode, stderr=self.stderr)


class RecordingResolver:
    """AssetResolver that records paths and returns a marker element."""

    def __init__(self) -> None:
        self.paths: list[str] = []

    def resolve(self, path: str) -> str:
        self.paths.append(path)
        return f'<object data="{path}"></object>'


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def resolver() -> RecordingResolver:
    return RecordingResolver()


@pytest.fixture
def make_runner():
    """Factory for RecordingRunner with custom results."""
    return RecordingRunner
