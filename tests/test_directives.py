"""Tests for directive lines, argument splitting and the registry."""

import pytest

from merry import CompileConfig, Merry, parse
from merry.directives import (
    DirectiveHandler,
    DirectiveKind,
    DirectiveRegistryBuilder,
    EmbedDirective,
    LinkDirective,
    RewriteDirective,
    create_default_registry,
    create_registry_with_defaults,
)
from merry.nodes import Directive, HtmlInline, QualifiedSpan
from merry.parsing.blocks.directive import split_arguments


class TestSplitArguments:
    """Quote-aware argument splitting."""

    def test_whitespace_separated(self) -> None:
        assert split_arguments("a  b\tc") == (("a", "b", "c"), False)

    def test_quoted_argument_keeps_spaces(self) -> None:
        assert split_arguments('math "python3 -m katex" --inline') == (
            ("math", "python3 -m katex", "--inline"),
            False,
        )

    def test_quote_ends_argument(self) -> None:
        assert split_arguments('"a b"c') == (("a b", "c"), False)

    def test_missing_end_quote(self) -> None:
        args, missing = split_arguments('wiki "https://example.org')
        assert missing
        assert args == ("wiki", "https://example.org")

    def test_empty(self) -> None:
        assert split_arguments("") == ((), False)


class TestDirectiveLines:
    """Directive nodes and recorded declarations."""

    def test_directive_node(self) -> None:
        node = parse("| href w https://w.org").root.children[0]
        assert isinstance(node, Directive)
        assert node.name == "href"
        assert node.args == ("w", "https://w.org")
        assert node.raw == "w https://w.org"

    def test_declaration_recorded(self) -> None:
        doc = parse("# A\n| href w https://w.org")
        (declaration,) = doc.declarations[("href", "w")]
        assert declaration.tag == "w"
        assert declaration.args == ("https://w.org",)
        assert declaration.section == 1

    def test_repeated_declarations_kept_in_order(self) -> None:
        doc = parse("| href w a\n| href w b")
        assert [d.args for d in doc.declarations[("href", "w")]] == [("a",), ("b",)]

    def test_directive_without_arguments(self) -> None:
        doc = parse("| embed")
        assert doc.declarations[("embed", None)][0].args == ()

    def test_iter_declarations_in_source_order(self) -> None:
        doc = parse("| rewrite m cat\n| href w a\n| rewrite n cat")
        assert [d.tag for d in doc.iter_declarations()] == ["m", "w", "n"]


class TestRegistry:
    """DirectiveRegistry and its builder."""

    def test_default_names(self) -> None:
        registry = create_default_registry()
        assert registry.names == frozenset({"link", "href", "embed", "rewrite"})
        assert len(registry) == 4

    def test_default_registry_is_cached(self) -> None:
        assert create_default_registry() is create_default_registry()

    def test_aliases_share_a_handler(self) -> None:
        registry = create_default_registry()
        assert registry.get("link") is registry.get("href")
        assert "href" in registry
        assert registry.get("nope") is None

    def test_builtins_satisfy_protocol(self) -> None:
        for handler in (LinkDirective(), EmbedDirective(), RewriteDirective()):
            assert isinstance(handler, DirectiveHandler)

    def test_builtin_kinds(self) -> None:
        assert LinkDirective.kind is DirectiveKind.DECLARATIVE
        assert RewriteDirective.kind is DirectiveKind.TRANSFORMATIONAL
        assert not EmbedDirective.declares_tag

    def test_duplicate_name_rejected(self) -> None:
        builder = create_registry_with_defaults()
        with pytest.raises(ValueError, match="already registered"):
            builder.register(LinkDirective())

    def test_incomplete_handler_rejected(self) -> None:
        class Nameless:
            kind = DirectiveKind.DECLARATIVE

        with pytest.raises(TypeError, match="names"):
            DirectiveRegistryBuilder().register(Nameless())

    def test_invalid_kind_rejected(self) -> None:
        class Odd:
            names = ("odd",)
            kind = "declarative"
            declares_tag = False
            arity = (0, 0)
            usage = "odd"

        with pytest.raises(TypeError, match="invalid kind"):
            DirectiveRegistryBuilder().register(Odd())

    def test_custom_handler(self) -> None:
        class Abbr:
            names = ("abbr",)
            kind = DirectiveKind.DECLARATIVE
            declares_tag = True
            arity = (2, 2)
            usage = "abbr <tag> <expansion>"

            def invoke(self, directive, ctx):
                return None

            def qualify(self, node, declaration, ctx):
                return node

        registry = create_registry_with_defaults().register(Abbr()).build()
        assert "abbr" in registry
        assert len(registry.handlers) == 4


class Shout:
    """Transformational handler that replaces every tagged node."""

    names = ("shout",)
    kind = DirectiveKind.TRANSFORMATIONAL
    declares_tag = True
    arity = (1, 1)
    usage = "shout <tag>"

    def __init__(self) -> None:
        self.seen: list[str] = []

    def invoke(self, directive, ctx):
        return None

    def qualify(self, node, declaration, ctx):
        self.seen.append(type(node).__name__)
        return HtmlInline(location=node.location, html="<b>SHOUT</b>")


class TestCustomTransformationalHandler:
    """Custom handlers receive every node carrying their tag."""

    def test_spans_and_inline_verbatims_are_both_handed_over(self) -> None:
        shout = Shout()
        registry = create_registry_with_defaults().register(shout).build()
        html = Merry(CompileConfig(directive_registry=registry))("[hi]{s} and `c`{s}\n| shout s")
        assert "<p><b>SHOUT</b> and <b>SHOUT</b></p>" in html
        assert shout.seen == ["QualifiedSpan", "InlineVerbatim"]

    def test_bound_node_has_no_bindings_left(self) -> None:
        received = []

        class Keep(Shout):
            def qualify(self, node, declaration, ctx):
                received.append(node)
                return node

        registry = create_registry_with_defaults().register(Keep()).build()
        html = Merry(CompileConfig(directive_registry=registry))("[hi]{s}\n| shout s")
        (span,) = received
        assert isinstance(span, QualifiedSpan)
        assert span.bindings == ()
        assert '<span data-tag="s">hi</span>' in html
