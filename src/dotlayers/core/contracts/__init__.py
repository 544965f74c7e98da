"""Configuration contracts: validated records passed between pipeline stages."""
from __future__ import annotations

from dotlayers.core.contracts.hook_result import HookResult
from dotlayers.core.contracts.machine_config import MachineConfig
from dotlayers.core.contracts.tool_config import LayerSpec, ToolConfig

__all__ = ["HookResult", "LayerSpec", "MachineConfig", "ToolConfig"]
