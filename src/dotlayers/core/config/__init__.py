"""Configuration ingestion: tool definitions and machine profiles."""
from __future__ import annotations

from dotlayers.core.config.builder import build_tool_config, resolve_hook_path
from dotlayers.core.config.models import RawToolDefinition
from dotlayers.core.config.parser import find_tool_definition, list_tools, parse_tool_definition
from dotlayers.core.config.profiles import (
    describe_profile,
    find_profile,
    list_profiles,
    load_machine_config,
)

__all__ = [
    "RawToolDefinition",
    "build_tool_config",
    "describe_profile",
    "find_profile",
    "find_tool_definition",
    "list_profiles",
    "list_tools",
    "load_machine_config",
    "parse_tool_definition",
    "resolve_hook_path",
]
