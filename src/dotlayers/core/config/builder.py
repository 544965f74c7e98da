"""Turn a raw tool definition into a validated ``ToolConfig``."""
from __future__ import annotations

import posixpath
from typing import List

from dotlayers.core.config.models import RawToolDefinition
from dotlayers.core.contracts import ToolConfig
from dotlayers.core.contracts._rules import is_builtin_hook
from dotlayers.core.exceptions import ValidationError


def resolve_hook_path(hook: str, tool_dir: str) -> str:
    """``builtin:*`` and absolute paths pass through; the rest is tool-dir relative."""
    if not hook or is_builtin_hook(hook) or hook.startswith("/"):
        return hook
    if hook.startswith("./"):
        hook = hook[2:]
    return f"{tool_dir.rstrip('/')}/{hook}"


def build_tool_config(raw: RawToolDefinition, tool_dir: str) -> ToolConfig:
    """Build and validate the ToolConfig for the tool living in ``tool_dir``.

    Raises:
        ValidationError: With every problem found, from both the raw
            definition and the resulting record.
    """
    tool_name = posixpath.basename(tool_dir.rstrip("/"))
    errors: List[str] = []

    if not raw.target:
        errors.append("target is required")
    if not raw.merge_hook:
        errors.append("merge_hook is required")

    config = ToolConfig(
        tool_name=tool_name,
        target=raw.target,
        merge_hook=resolve_hook_path(raw.merge_hook, tool_dir),
        env=dict(raw.env),
    )
    if raw.install_hook:
        config.set_install_hook(resolve_hook_path(raw.install_hook, tool_dir))

    for name, spec in raw.layers:
        source, sep, path = spec.partition(":")
        if not sep or not source or not path:
            errors.append(f"invalid layer spec for {name}: {spec} (expected source:path)")
            continue
        config.add_layer(name, source, path)

    for err in config.validation_errors():
        if err not in errors:
            errors.append(err)

    if errors:
        raise ValidationError(
            "ToolConfig", errors, context={"tool": tool_name, "path": raw.source_path}
        )
    return config


__all__ = ["build_tool_config", "resolve_hook_path"]
