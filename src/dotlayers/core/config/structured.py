"""Structured (JSON/YAML) tool definition parser."""
from __future__ import annotations

from typing import Any

from dotlayers.core.config.models import RawToolDefinition
from dotlayers.core.schemas import TOOL_DEFINITION, validate_document
from dotlayers.core.utils.io import parse_document


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_structured_tool(text: str, path: str) -> RawToolDefinition:
    """Parse a ``tool.json`` / ``tool.yaml`` document.

    Raises:
        ValidationError: On malformed syntax or a document of the wrong shape.
    """
    data = parse_document(text, path)
    if data is None:
        data = {}
    validate_document(data, TOOL_DEFINITION, subject="Tool definition", context={"path": path})

    raw = RawToolDefinition(
        source_path=path,
        target=_text(data.get("target")),
        merge_hook=_text(data.get("merge_hook")),
        install_hook=_text(data.get("install_hook")),
    )
    for layer in data.get("layers") or []:
        raw.layers.append((layer["name"], f"{layer['source']}:{layer['path']}"))
    for key, value in (data.get("env") or {}).items():
        raw.env[key] = _text(value)
    return raw


__all__ = ["parse_structured_tool"]
