"""Tests for ContextVar-based compile configuration."""

import threading

from merry import Merry
from merry.config import (
    CompileConfig,
    compile_config_context,
    get_compile_config,
    reset_compile_config,
    set_compile_config,
)
from merry.directives import create_default_registry
from merry.directives.registry import registry_from_config


class TestCompileConfig:
    """Defaults and construction."""

    def test_defaults(self) -> None:
        config = CompileConfig()
        assert config.directive_registry is None
        assert config.rewrite_timeout == 30.0
        assert config.indent_class == "indented"

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = CompileConfig.from_dict({"rewrite_timeout": 2, "colour": "red"})
        assert config.rewrite_timeout == 2
        assert config.indent_class == "indented"

    def test_default_registry(self) -> None:
        assert registry_from_config(CompileConfig()) is create_default_registry()


class TestContext:
    """Setting, resetting and scoping the active config."""

    def test_set_and_reset(self) -> None:
        set_compile_config(CompileConfig(indent_class="a"))
        try:
            assert get_compile_config().indent_class == "a"
        finally:
            reset_compile_config()
        assert get_compile_config().indent_class == "indented"

    def test_context_manager_restores_previous(self) -> None:
        with compile_config_context(CompileConfig(indent_class="outer")):
            with compile_config_context(CompileConfig(indent_class="inner")):
                assert get_compile_config().indent_class == "inner"
            assert get_compile_config().indent_class == "outer"
        assert get_compile_config().indent_class == "indented"

    def test_merry_does_not_leak_config(self) -> None:
        Merry(CompileConfig(indent_class="nest"))("# A")
        assert get_compile_config().indent_class == "indented"

    def test_threads_are_isolated(self) -> None:
        results: dict[str, str] = {}
        barrier = threading.Barrier(2)

        def work(name: str) -> None:
            with compile_config_context(CompileConfig(indent_class=name)):
                barrier.wait()
                results[name] = get_compile_config().indent_class

        threads = [threading.Thread(target=work, args=(name,)) for name in ("a", "b")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert results == {"a": "a", "b": "b"}
