"""Registry of named merge strategies (``builtin:<name>``)."""
from __future__ import annotations

from typing import Callable, Dict, List

from dotlayers.core.contracts import HookResult, ToolConfig
from dotlayers.core.exceptions import InvalidInputError, NotFoundError
from dotlayers.core.executor.context import StrategyContext

StrategyHandler = Callable[[ToolConfig, StrategyContext], HookResult]


class StrategyRegistry:
    """Name -> handler mapping with explicit registration."""

    def __init__(self) -> None:
        self._handlers: Dict[str, StrategyHandler] = {}

    def register(self, name: str, handler: StrategyHandler) -> None:
        if not name:
            raise InvalidInputError("strategy name is required")
        if handler is None or not callable(handler):
            raise InvalidInputError(f"strategy handler for '{name}' must be callable")
        self._handlers[name] = handler

    def exists(self, name: str) -> bool:
        return name in self._handlers

    def get(self, name: str) -> StrategyHandler:
        try:
            return self._handlers[name]
        except KeyError:
            raise NotFoundError(
                f"Unknown builtin strategy: {name}", context={"strategy": name}
            ) from None

    def names(self) -> List[str]:
        return sorted(self._handlers)

    def unregister(self, name: str) -> None:
        if name not in self._handlers:
            raise NotFoundError(f"Unknown builtin strategy: {name}")
        del self._handlers[name]

    def clear(self) -> None:
        self._handlers.clear()

    def count(self) -> int:
        return len(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers


def default_registry() -> StrategyRegistry:
    """A fresh registry pre-loaded with the builtin strategies."""
    from dotlayers.core.executor.strategies import register_builtins

    registry = StrategyRegistry()
    register_builtins(registry)
    return registry


__all__ = ["StrategyHandler", "StrategyRegistry", "default_registry"]
