"""Builtin merge strategies."""
from __future__ import annotations

from typing import TYPE_CHECKING

from dotlayers.core.executor.strategies.base import MergeStrategy
from dotlayers.core.executor.strategies.concat import ConcatStrategy
from dotlayers.core.executor.strategies.json_merge import JsonMergeStrategy
from dotlayers.core.executor.strategies.skip import SkipStrategy
from dotlayers.core.executor.strategies.source import SourceStrategy
from dotlayers.core.executor.strategies.symlink import SymlinkStrategy

if TYPE_CHECKING:
    from dotlayers.core.executor.registry import StrategyRegistry

BUILTIN_ALIASES = {"json": "json-merge"}


def register_builtins(registry: StrategyRegistry) -> None:
    strategies = [
        SymlinkStrategy(),
        ConcatStrategy(),
        JsonMergeStrategy(),
        SourceStrategy(),
        SkipStrategy(),
    ]
    by_name = {}
    for strategy in strategies:
        registry.register(strategy.name, strategy)
        by_name[strategy.name] = strategy
    for alias, name in BUILTIN_ALIASES.items():
        registry.register(alias, by_name[name])


__all__ = [
    "BUILTIN_ALIASES",
    "ConcatStrategy",
    "JsonMergeStrategy",
    "MergeStrategy",
    "SkipStrategy",
    "SourceStrategy",
    "SymlinkStrategy",
    "register_builtins",
]
