"""Helpers shared by the backup commands."""
from __future__ import annotations

import argparse

from dotlayers.cli import get_backend, get_dotfiles_dir
from dotlayers.core.backup import BackupManager
from dotlayers.core.orchestrator import BACKUP_DIRNAME


def get_backup_manager(args: argparse.Namespace) -> BackupManager:
    return BackupManager(get_backend(args), f"{get_dotfiles_dir(args)}/{BACKUP_DIRNAME}")
