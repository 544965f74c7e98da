"""Tool definition lookup and parsing.

A tool directory may hold a structured definition (``tool.json``,
``tool.yaml``, ``tool.yml``) and/or a legacy ``tool.conf``. The
structured file always wins when both are present.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from dotlayers.core.backend import Backend
from dotlayers.core.config.legacy import parse_legacy_tool
from dotlayers.core.config.models import RawToolDefinition
from dotlayers.core.config.structured import parse_structured_tool
from dotlayers.core.exceptions import NotFoundError
from dotlayers.core.utils.io import read_config_text

logger = logging.getLogger(__name__)

STRUCTURED_TOOL_FILES = ("tool.json", "tool.yaml", "tool.yml")
LEGACY_TOOL_FILE = "tool.conf"


def find_tool_definition(backend: Backend, tool_dir: str) -> Optional[str]:
    """Path of the definition file to use, or ``None`` if there is none."""
    root = tool_dir.rstrip("/")
    for filename in (*STRUCTURED_TOOL_FILES, LEGACY_TOOL_FILE):
        candidate = f"{root}/{filename}"
        if backend.is_file(candidate):
            return candidate
    return None


def parse_tool_definition(backend: Backend, tool_dir: str) -> RawToolDefinition:
    """Read and parse the tool definition in ``tool_dir``.

    Raises:
        NotFoundError: If the directory holds no definition file.
        ValidationError: If the definition is malformed.
    """
    path = find_tool_definition(backend, tool_dir)
    if path is None:
        raise NotFoundError(
            f"No tool definition found in {tool_dir}", context={"tool_dir": tool_dir}
        )
    text = read_config_text(backend, path)
    if path.endswith(LEGACY_TOOL_FILE):
        logger.debug("Parsing legacy definition %s", path)
        return parse_legacy_tool(text, path)
    logger.debug("Parsing structured definition %s", path)
    return parse_structured_tool(text, path)


def list_tools(backend: Backend, dotfiles_dir: str) -> List[str]:
    """Names of every directory under ``tools/`` that holds a definition."""
    tools_dir = f"{dotfiles_dir.rstrip('/')}/tools"
    return [
        name
        for name in backend.list_dir(tools_dir)
        if find_tool_definition(backend, f"{tools_dir}/{name}") is not None
    ]


__all__ = [
    "LEGACY_TOOL_FILE",
    "STRUCTURED_TOOL_FILES",
    "find_tool_definition",
    "list_tools",
    "parse_tool_definition",
]
