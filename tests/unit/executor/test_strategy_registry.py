"""StrategyRegistry and the default builtin set."""
from __future__ import annotations

import pytest

from dotlayers.core.contracts import HookResult
from dotlayers.core.exceptions import InvalidInputError, NotFoundError
from dotlayers.core.executor import StrategyRegistry, default_registry


def noop(config, context) -> HookResult:
    return HookResult.ok()


class TestStrategyRegistry:
    def test_register_and_get(self) -> None:
        registry = StrategyRegistry()
        registry.register("noop", noop)
        assert registry.exists("noop")
        assert "noop" in registry
        assert registry.get("noop") is noop
        assert registry.count() == 1

    def test_register_requires_name_and_callable(self) -> None:
        registry = StrategyRegistry()
        with pytest.raises(InvalidInputError):
            registry.register("", noop)
        with pytest.raises(InvalidInputError, match="must be callable"):
            registry.register("x", "not callable")  # type: ignore[arg-type]

    def test_unknown_strategy(self) -> None:
        with pytest.raises(NotFoundError, match="Unknown builtin strategy: nope"):
            StrategyRegistry().get("nope")

    def test_unregister_and_clear(self) -> None:
        registry = StrategyRegistry()
        registry.register("a", noop)
        registry.register("b", noop)
        registry.unregister("a")
        assert registry.names() == ["b"]
        with pytest.raises(NotFoundError):
            registry.unregister("a")
        registry.clear()
        assert registry.count() == 0

    def test_register_replaces_existing(self) -> None:
        registry = StrategyRegistry()
        registry.register("a", noop)

        def other(config, context):
            return HookResult.ok("/x")

        registry.register("a", other)
        assert registry.get("a") is other


class TestDefaultRegistry:
    def test_builtins_present(self) -> None:
        registry = default_registry()
        assert registry.names() == ["concat", "json", "json-merge", "skip", "source", "symlink"]
        assert registry.get("json") is registry.get("json-merge")

    def test_each_call_returns_fresh_registry(self) -> None:
        first = default_registry()
        first.clear()
        assert default_registry().count() == 6
