"""Legacy flat-file formats.

``tool.conf``::

    target="~/.gitconfig"
    merge_hook="builtin:concat"
    layers_base="local:configs/git/base"
    env_EDITOR="vim"

Machine profile ``machines/<name>.sh``::

    TOOLS=(git zsh)
    git_layers=(base work)
    zsh_layers=(
        base   # comments are fine
        work
    )
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from dotlayers.core.config.models import RawToolDefinition

_ASSIGNMENT_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)=(.*)$")


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_legacy_tool(text: str, path: str) -> RawToolDefinition:
    """Parse ``key="value"`` lines; unknown keys are ignored."""
    raw = RawToolDefinition(source_path=path)
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = _ASSIGNMENT_RE.match(line)
        if not match:
            continue
        key, value = match.group(1), _unquote(match.group(2))
        if key == "target":
            raw.target = value
        elif key == "merge_hook":
            raw.merge_hook = value
        elif key == "install_hook":
            raw.install_hook = value
        elif key.startswith("layers_") and len(key) > len("layers_"):
            name = key[len("layers_"):]
            raw.layers = [(n, s) for n, s in raw.layers if n != name]
            raw.layers.append((name, value))
        elif key.startswith("env_") and len(key) > len("env_"):
            raw.env[key[len("env_"):]] = value
    return raw


def parse_bash_array(text: str, name: str) -> Optional[List[str]]:
    """Extract the words of ``name=( ... )``; ``None`` when not declared.

    Handles single- and multi-line arrays, strips ``#`` comments and quotes.
    """
    opener = re.compile(rf"^\s*{re.escape(name)}\s*=\(")
    words: List[str] = []
    in_array = False
    found = False
    for line in text.splitlines():
        stripped = line.split("#", 1)[0]
        if not in_array:
            match = opener.match(stripped)
            if not match:
                continue
            found = True
            stripped = stripped[match.end():]
            in_array = True
        if ")" in stripped:
            stripped = stripped[: stripped.rindex(")")]
            in_array = False
        words.extend(stripped.replace('"', " ").replace("'", " ").split())
        if not in_array:
            break
    return words if found else None


def parse_legacy_profile(text: str) -> Tuple[List[str], Dict[str, List[str]]]:
    """Return ``(tools, tool -> layers)`` from a bash profile.

    Every listed tool gets a layer entry; a tool without a ``<tool>_layers``
    array gets an empty list (all declared layers).
    """
    tools = parse_bash_array(text, "TOOLS") or []
    layers: Dict[str, List[str]] = {}
    for tool in tools:
        layers[tool] = parse_bash_array(text, f"{tool}_layers") or []
    return tools, layers


__all__ = ["parse_bash_array", "parse_legacy_profile", "parse_legacy_tool"]
