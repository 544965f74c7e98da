"""Raw, unvalidated tool definition as read from disk."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(slots=True)
class RawToolDefinition:
    """Flat view of a tool definition, shared by every on-disk format.

    Attributes:
        source_path: File the definition was read from
        target: Target path as written (``~`` not yet expanded)
        merge_hook: Merge hook as written
        install_hook: Install hook as written (may be empty)
        layers: ``(name, "source:path")`` pairs in declaration order
        env: Custom variables exported to external hooks
    """

    source_path: str
    target: str = ""
    merge_hook: str = ""
    install_hook: str = ""
    layers: List[Tuple[str, str]] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)


__all__ = ["RawToolDefinition"]
