"""Hook execution: strategy registry, hook environment and runner."""
from __future__ import annotations

from dotlayers.core.executor.context import StrategyContext
from dotlayers.core.executor.env import build_hook_env, detect_os
from dotlayers.core.executor.registry import StrategyRegistry, default_registry
from dotlayers.core.executor.runner import HookRunner

__all__ = [
    "HookRunner",
    "StrategyContext",
    "StrategyRegistry",
    "build_hook_env",
    "default_registry",
    "detect_os",
]
