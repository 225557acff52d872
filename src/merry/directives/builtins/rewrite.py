"""``rewrite``: replace tagged verbatims with the output of a command.

Syntax:
    | rewrite math katex --display-mode
    ```
    \\int_0^1 x\\,dx
    ```{math}

Each verbatim bound to the tag is written to the command's stdin; its stdout
is substituted verbatim as an HTML fragment. Commands run one at a time, in
source order. Any failure aborts compilation.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

from merry.directives.protocol import DirectiveKind
from merry.errors import ExternalProcessError
from merry.nodes import HtmlBlock, HtmlInline, InlineVerbatim, Verbatim

if TYPE_CHECKING:
    from merry.directives.protocol import DirectiveContext
    from merry.nodes import Block, Directive, DirectiveDeclaration, Node


class RewriteDirective:
    names = ("rewrite",)
    kind = DirectiveKind.TRANSFORMATIONAL
    declares_tag = True
    arity = (2, None)
    usage = "rewrite <tag> <command> [argument...]"

    def invoke(self, directive: Directive, ctx: DirectiveContext) -> Block | None:
        return None

    def qualify(self, node: Node, declaration: DirectiveDeclaration, ctx: DirectiveContext) -> Node:
        match node:
            case Verbatim(content=content):
                stdin = content + "\n" if content else ""
                return HtmlBlock(location=node.location, html=self._run(stdin, declaration, ctx))
            case InlineVerbatim(content=content):
                return HtmlInline(location=node.location, html=self._run(content, declaration, ctx))
            case _:
                # Qualified spans stay as tagged spans
                return node

    def _run(self, stdin: str, declaration: DirectiveDeclaration, ctx: DirectiveContext) -> str:
        command = declaration.args
        shown = " ".join(command)
        try:
            result = ctx.process_runner.run(command, stdin)
        except subprocess.TimeoutExpired as e:
            raise ExternalProcessError(
                f"`{shown}` timed out after {e.timeout} seconds",
                declaration.location,
                command=command,
            ) from e
        except UnicodeError as e:
            raise ExternalProcessError(
                f"`{shown}` produced output that is not valid UTF-8",
                declaration.location,
                command=command,
            ) from e
        except OSError as e:
            raise ExternalProcessError(
                f"could not run `{shown}`: {e.strerror or e}",
                declaration.location,
                command=command,
            ) from e

        if result.returncode != 0:
            detail = result.stderr.strip().splitlines()
            suffix = f": {detail[-1]}" if detail else ""
            raise ExternalProcessError(
                f"`{shown}` exited with status {result.returncode}{suffix}",
                declaration.location,
                command=command,
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result.stdout

    def __repr__(self) -> str:
        return "RewriteDirective()"
