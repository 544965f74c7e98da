"""Backup-before-overwrite.

Every builtin strategy calls :meth:`BackupManager.back_up_if_exists`
before replacing a target. Backups live flat in one directory, named
``<basename>.<YYYYmmdd_HHMMSS>`` with ``_1``, ``_2``... appended when
two backups of the same name land in the same second. A symlink is
stored as a small file holding ``__SYMLINK:<link target>`` so the link
itself, not what it points at, is what gets preserved.
"""
from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from dotlayers.core.backend import Backend
from dotlayers.core.exceptions import BackupError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
SYMLINK_MARKER = "__SYMLINK:"

_BACKUP_NAME_RE = re.compile(r"^(?P<base>.+)\.(?P<ts>\d{8}_\d{6})(?:_(?P<n>\d+))?$")


@dataclass(frozen=True, slots=True)
class BackupEntry:
    """One stored backup."""

    name: str
    path: str
    original_name: str
    created_at: Optional[datetime]


class BackupManager:
    """Creates, lists, restores and prunes backups through a backend."""

    def __init__(
        self,
        backend: Backend,
        backup_dir: str,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not backup_dir:
            raise InvalidInputError("backup directory is required")
        self.backend = backend
        self.backup_dir = backup_dir.rstrip("/") or "/"
        self._clock = clock or datetime.now

    def _backup_path_for(self, path: str) -> str:
        base = posixpath.basename(path.rstrip("/")) or "root"
        stamp = self._clock().strftime(TIMESTAMP_FORMAT)
        candidate = f"{self.backup_dir}/{base}.{stamp}"
        counter = 0
        while self.backend.exists(candidate):
            counter += 1
            candidate = f"{self.backup_dir}/{base}.{stamp}_{counter}"
        return candidate

    def back_up_if_exists(self, path: str) -> Optional[str]:
        """Back up ``path`` if anything (including a dangling link) is there.

        Returns:
            The backup path, or ``None`` when there was nothing to save.

        Raises:
            BackupError: If the copy could not be made; ``path`` is left untouched.
        """
        if not self.backend.exists(path):
            return None

        try:
            self.backend.mkdir(self.backup_dir)
            destination = self._backup_path_for(path)
            logger.debug("Backing up %s to %s", path, destination)
            if self.backend.is_symlink(path):
                link_target = self.backend.readlink(path)
                self.backend.write_text(destination, f"{SYMLINK_MARKER}{link_target}")
            else:
                self.backend.copy(path, destination)
        except OSError as e:
            raise BackupError(
                f"Backup failed for: {path}", context={"path": path, "reason": str(e)}
            ) from e

        logger.info("Backed up %s -> %s", path, destination)
        return destination

    def restore(self, backup: str, original_path: str) -> None:
        """Put a backup back at ``original_path``, replacing what is there."""
        backup_path = backup if backup.startswith("/") else f"{self.backup_dir}/{backup}"
        if not self.backend.exists(backup_path):
            raise NotFoundError(f"Backup not found: {backup_path}")

        logger.info("Restoring %s from %s", original_path, backup_path)
        if self.backend.is_file(backup_path):
            content = self.backend.read_text(backup_path)
            self.backend.remove_tree(original_path)
            if content.startswith(SYMLINK_MARKER):
                self.backend.symlink(content[len(SYMLINK_MARKER):], original_path)
            else:
                self.backend.copy(backup_path, original_path)
        else:
            self.backend.remove_tree(original_path)
            self.backend.copy(backup_path, original_path)

    def list_backups(self) -> List[BackupEntry]:
        entries: List[BackupEntry] = []
        for name in self.backend.list_dir(self.backup_dir):
            match = _BACKUP_NAME_RE.match(name)
            created: Optional[datetime] = None
            original = name
            if match:
                original = match.group("base")
                created = datetime.strptime(match.group("ts"), TIMESTAMP_FORMAT)
            entries.append(
                BackupEntry(
                    name=name,
                    path=f"{self.backup_dir}/{name}",
                    original_name=original,
                    created_at=created,
                )
            )
        return entries

    def cleanup(self, days: int = 30) -> List[str]:
        """Delete backups older than ``days``; returns the removed paths.

        Age comes from the timestamp in the backup name, so entries that do
        not follow the naming scheme are never touched.
        """
        if days < 0:
            raise InvalidInputError(f"days must be non-negative: {days}")
        cutoff = self._clock() - timedelta(days=days)
        removed: List[str] = []
        for entry in self.list_backups():
            if entry.created_at is not None and entry.created_at < cutoff:
                self.backend.remove_tree(entry.path)
                removed.append(entry.path)
        if removed:
            logger.info("Removed %d backup(s) older than %d days", len(removed), days)
        return removed


__all__ = ["BackupEntry", "BackupManager", "SYMLINK_MARKER", "TIMESTAMP_FORMAT"]
