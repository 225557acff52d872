"""Directive parsing for merry.

A directive occupies one line: ``| name arg...``. Arguments are separated by
spaces; a double-quoted argument may contain spaces. Every directive line is
also recorded as a DirectiveDeclaration so the resolution pass can look tags
up without walking the tree again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from merry.nodes import Directive, DirectiveDeclaration
from merry.parsing.charsets import ARGUMENT_WHITESPACE
from merry.tokens import TokenType

if TYPE_CHECKING:
    from merry.nodes import DeclarationKey
    from merry.parsing.sections import SectionStack
    from merry.tokens import Token


def split_arguments(text: str) -> tuple[tuple[str, ...], bool]:
    """Split directive arguments on whitespace, honouring double quotes.

    A quote starts a new argument that runs until the next quote; the quotes
    themselves are dropped. There are no escapes.

    Returns:
        (arguments, missing_end_quote)

    Examples:
        >>> split_arguments('math "python3 -m katex" --inline')
        (('math', 'python3 -m katex', '--inline'), False)
        >>> split_arguments('wiki "https://example.org')
        (('wiki', 'https://example.org'), True)
    """
    args: list[str] = []
    current: list[str] = []
    started = False
    quoted = False

    def push() -> None:
        nonlocal started
        if started:
            args.append("".join(current))
            current.clear()
            started = False

    for char in text:
        if char == '"':
            push()
            if quoted:
                quoted = False
            else:
                quoted = True
                started = True
            continue
        if char in ARGUMENT_WHITESPACE and not quoted:
            push()
            continue
        current.append(char)
        started = True

    missing_end_quote = quoted
    push()
    return tuple(args), missing_end_quote


class DirectiveParsingMixin:
    """Mixin for directive line parsing.

    Required Host Attributes:
        - _current: Token | None
        - _sections: SectionStack
        - _declarations: dict[DeclarationKey, list[DirectiveDeclaration]]

    Required Host Methods:
        - _advance() -> Token | None

    """

    _current: Token | None
    _sections: SectionStack
    _declarations: dict[DeclarationKey, list[DirectiveDeclaration]]

    def _parse_directive(self) -> Directive:
        """Parse the current DIRECTIVE token and record its declaration.

        Argument problems (unknown names, arity, unterminated quotes) are not
        errors here; the resolution pass reports them with the registry at hand.
        """
        token = self._current
        assert token is not None and token.type == TokenType.DIRECTIVE

        parts = token.value.split(None, 1)
        name = parts[0] if parts else ""
        raw = parts[1].strip() if len(parts) > 1 else ""
        args, missing_end_quote = split_arguments(raw)

        declaration = DirectiveDeclaration(
            name=name,
            tag=args[0] if args else None,
            args=args[1:],
            section=self._sections.current.index,
            location=token.location,
        )
        self._declarations.setdefault((name, declaration.tag), []).append(declaration)

        self._advance()
        return Directive(
            location=token.location,
            name=name,
            args=args,
            raw=raw,
            unterminated_quote=missing_end_quote,
        )
