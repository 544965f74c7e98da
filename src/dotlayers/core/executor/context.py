"""Execution context handed to every merge/install strategy."""
from __future__ import annotations

from dataclasses import dataclass

from dotlayers.core.backend import Backend
from dotlayers.core.backup import BackupManager


@dataclass(slots=True)
class StrategyContext:
    """Collaborators a strategy may use.

    Attributes:
        backend: Filesystem/process backend
        backup: Backup manager for the run
        dotfiles_dir: Dotfiles root
        machine: Active machine profile name (may be empty)
    """

    backend: Backend
    backup: BackupManager
    dotfiles_dir: str
    machine: str = ""


__all__ = ["StrategyContext"]
