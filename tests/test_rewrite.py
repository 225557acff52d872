"""Tests for the rewrite directive and the executor."""

import subprocess
import sys

import pytest

from merry import CompileConfig, Merry, compile_file, execute, parse, resolve
from merry.config import compile_config_context
from merry.errors import ExternalProcessError
from merry.nodes import HtmlBlock, HtmlInline
from merry.process import ProcessRunner, SubprocessRunner

UPPER = "import sys; sys.stdout.write(sys.stdin.read().upper())"
FAIL = "import sys; sys.stderr.write('bad input'); sys.exit(3)"


def rewrite_source(code: str) -> str:
    return f'| rewrite up "{sys.executable}" -c "{code}"\n```\nabc\n```{{up}}'


class TestRewriteWithFakeRunner:
    """Stdin, argv and output handling."""

    def test_block_output_replaces_verbatim(self, runner) -> None:
        html = Merry(CompileConfig(process_runner=runner))(
            "| rewrite math katex --display\n```\nx^2\n```{math}"
        )
        assert runner.calls == [(("katex", "--display"), "x^2\n")]
        assert "<b>ok</b>\n" in html
        assert "<pre>" not in html

    def test_inline_content_is_piped_raw(self, runner) -> None:
        html = Merry(CompileConfig(process_runner=runner))(
            "see `x`{math}\n| rewrite math katex"
        )
        assert runner.calls == [(("katex",), "x")]
        assert "<p>see <b>ok</b></p>" in html

    def test_multiline_block(self, runner) -> None:
        Merry(CompileConfig(process_runner=runner))(
            "| rewrite m cmd\n```\na\n  b\n```{m}"
        )
        assert runner.calls[0][1] == "a\n  b\n"

    def test_empty_block(self, runner) -> None:
        Merry(CompileConfig(process_runner=runner))("| rewrite m cmd\n```\n```{m}")
        assert runner.calls[0][1] == ""

    def test_commands_run_in_source_order(self, runner) -> None:
        Merry(CompileConfig(process_runner=runner))(
            "| rewrite m cmd\n```\none\n```{m}\n`two`{m}\n-- `three`{m}"
        )
        assert [stdin for _, stdin in runner.calls] == ["one\n", "two", "three"]

    def test_output_is_not_modified(self, make_runner) -> None:
        runner = make_runner(stdout="<math>\n  <mi>x</mi>\n</math>\n\n")
        html = Merry(CompileConfig(process_runner=runner))("| rewrite m cmd\n```\nx\n```{m}")
        assert "<math>\n  <mi>x</mi>\n</math>\n\n" in html

    def test_executed_nodes(self, runner) -> None:
        with compile_config_context(CompileConfig(process_runner=runner)):
            doc = execute(resolve(parse("| rewrite m cmd\n```\nx\n```{m}\n`y`{m}")))
        block, para = doc.root.children
        assert isinstance(block, HtmlBlock)
        assert isinstance(para.children[0], HtmlInline)

    def test_unused_tag_runs_nothing(self, runner) -> None:
        Merry(CompileConfig(process_runner=runner))("| rewrite m cmd\ntext")
        assert runner.calls == []


class TestRewriteFailures:
    """Every failure is an ExternalProcessError at the directive line."""

    def test_nonzero_exit(self, make_runner) -> None:
        runner = make_runner(returncode=2, stderr="boom\nbad input\n")
        with pytest.raises(ExternalProcessError, match="status 2: bad input") as exc_info:
            Merry(CompileConfig(process_runner=runner))("text\n| rewrite m cmd\n```\nx\n```{m}")
        err = exc_info.value
        assert err.returncode == 2
        assert err.command == ("cmd",)
        assert err.stderr == "boom\nbad input\n"
        assert err.location.lineno == 2

    def test_spawn_failure(self, make_runner) -> None:
        runner = make_runner(error=FileNotFoundError(2, "No such file or directory"))
        with pytest.raises(ExternalProcessError, match="could not run `cmd`"):
            Merry(CompileConfig(process_runner=runner))("| rewrite m cmd\n`x`{m}")

    def test_timeout(self, make_runner) -> None:
        runner = make_runner(error=subprocess.TimeoutExpired(["cmd"], 5))
        with pytest.raises(ExternalProcessError, match="timed out after 5 seconds"):
            Merry(CompileConfig(process_runner=runner))("| rewrite m cmd\n`x`{m}")

    def test_bad_encoding(self, make_runner) -> None:
        error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        runner = make_runner(error=error)
        with pytest.raises(ExternalProcessError, match="not valid UTF-8"):
            Merry(CompileConfig(process_runner=runner))("| rewrite m cmd\n`x`{m}")


class TestSubprocessRunner:
    """The default runner spawns real processes."""

    def test_is_a_process_runner(self) -> None:
        assert isinstance(SubprocessRunner(), ProcessRunner)

    def test_pipes_stdin_to_stdout(self) -> None:
        result = SubprocessRunner().run([sys.executable, "-c", UPPER], "abc")
        assert result.stdout == "ABC"
        assert result.returncode == 0

    def test_missing_command_raises_oserror(self) -> None:
        with pytest.raises(OSError):
            SubprocessRunner().run(["merry-no-such-command-xyz"], "")

    def test_end_to_end(self) -> None:
        html = Merry()(rewrite_source(UPPER))
        assert "ABC\n" in html

    def test_timeout_config(self) -> None:
        slow = "import time; time.sleep(5)"
        with pytest.raises(ExternalProcessError, match="timed out"):
            Merry(CompileConfig(rewrite_timeout=0.5))(rewrite_source(slow))

    def test_failure_writes_no_output_file(self, tmp_path) -> None:
        source = tmp_path / "doc.md2"
        source.write_text(rewrite_source(FAIL), encoding="utf-8")
        output = tmp_path / "doc.html"
        with pytest.raises(ExternalProcessError, match="status 3: bad input"):
            compile_file(source, output)
        assert not output.exists()
