"""Injectable filesystem/process backends."""
from __future__ import annotations

from dotlayers.core.backend.base import Backend, PathLike, ProcessResult
from dotlayers.core.backend.local import LocalBackend
from dotlayers.core.backend.memory import MemoryBackend

__all__ = ["Backend", "LocalBackend", "MemoryBackend", "PathLike", "ProcessResult"]
