"""Builders for dotfiles trees used across tests.

Every helper writes through ``MemoryBackend.set_file`` / ``set_dir`` so
seeding never shows up in the recorded ``calls``.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from dotlayers.core.backend import MemoryBackend


def write_json(path: Path, data: Any) -> None:
    """Write JSON to a real path, creating parent directories if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def add_tool(
    backend: MemoryBackend,
    root: str,
    name: str,
    *,
    target: str,
    merge_hook: str,
    layers: Sequence[Tuple[str, str, str]] = (),
    install_hook: str = "",
    env: Optional[Mapping[str, str]] = None,
) -> str:
    """Write ``tools/<name>/tool.json``; ``layers`` are (name, source, path)."""
    data: Dict[str, Any] = {
        "target": target,
        "merge_hook": merge_hook,
        "layers": [{"name": n, "source": s, "path": p} for n, s, p in layers],
    }
    if install_hook:
        data["install_hook"] = install_hook
    if env:
        data["env"] = dict(env)
    path = f"{root}/tools/{name}/tool.json"
    backend.set_file(path, json.dumps(data))
    return path


def add_profile(
    backend: MemoryBackend,
    root: str,
    name: str,
    tools: Mapping[str, Iterable[str]],
) -> str:
    """Write ``machines/<name>.json`` mapping tool -> requested layers."""
    path = f"{root}/machines/{name}.json"
    data = {"name": name, "tools": {tool: list(layers) for tool, layers in tools.items()}}
    backend.set_file(path, json.dumps(data))
    return path


def add_layer_file(
    backend: MemoryBackend, root: str, rel_dir: str, filename: str, content: str
) -> str:
    """Create ``<root>/<rel_dir>/<filename>`` and return its path."""
    path = f"{root}/{rel_dir}/{filename}"
    backend.set_file(path, content)
    return path


def add_repos(backend: MemoryBackend, root: str, repos: List[Dict[str, str]]) -> str:
    path = f"{root}/repos.json"
    backend.set_file(path, json.dumps({"repositories": repos}))
    return path
