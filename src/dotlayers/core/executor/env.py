"""Environment contract for external merge/install scripts."""
from __future__ import annotations

import platform
from typing import Dict, Optional

from dotlayers.core.contracts import ToolConfig
from dotlayers.core.paths import path_expand

LIST_SEPARATOR = ":"


def detect_os(system: Optional[str] = None) -> str:
    """``darwin``, ``linux`` or ``unknown``."""
    name = (system if system is not None else platform.system()).lower()
    if name in ("darwin", "linux"):
        return name
    return "unknown"


def build_hook_env(
    config: ToolConfig,
    *,
    dotfiles_dir: str,
    machine: str = "",
    os_name: Optional[str] = None,
) -> Dict[str, str]:
    """Variables every external hook receives.

    Tool-declared custom variables are applied last but cannot replace
    the fixed names.
    """
    fixed = {
        "TOOL": config.tool_name,
        "TARGET": path_expand(config.target) if config.target else "",
        "LAYERS": LIST_SEPARATOR.join(config.layer_names()),
        "LAYER_PATHS": LIST_SEPARATOR.join(config.resolved_paths()),
        "DOTFILES_DIR": dotfiles_dir,
        "MACHINE": machine,
        "OS": os_name or detect_os(),
    }
    env = {key: value for key, value in config.env.items() if key not in fixed}
    env.update(fixed)
    return env


__all__ = ["LIST_SEPARATOR", "build_hook_env", "detect_os"]
