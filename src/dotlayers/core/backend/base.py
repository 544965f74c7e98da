"""Filesystem/process capability used by every pipeline stage.

Nothing above this layer touches ``os``, ``shutil`` or ``subprocess``
directly; callers receive a ``Backend`` instance and go through it. That
keeps the production path and the in-memory recorder on identical logic.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

PathLike = Union[str, Path]


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of an external process run through a backend."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Backend(ABC):
    """Abstract filesystem + process backend."""

    name: str = "abstract"

    # -- reading ----------------------------------------------------------

    @abstractmethod
    def read_text(self, path: PathLike) -> str:
        """Return file contents; raise ``FileNotFoundError`` when absent."""

    @abstractmethod
    def exists(self, path: PathLike) -> bool:
        """True for files, directories and symlinks (even dangling ones)."""

    @abstractmethod
    def is_file(self, path: PathLike) -> bool: ...

    @abstractmethod
    def is_dir(self, path: PathLike) -> bool: ...

    @abstractmethod
    def is_symlink(self, path: PathLike) -> bool: ...

    @abstractmethod
    def readlink(self, path: PathLike) -> str: ...

    @abstractmethod
    def list_dir(self, path: PathLike) -> List[str]:
        """Sorted entry names of a directory (empty when not a directory)."""

    # -- mutation ---------------------------------------------------------

    @abstractmethod
    def write_text(self, path: PathLike, content: str) -> None:
        """Write ``content``, creating parent directories as needed."""

    @abstractmethod
    def append_text(self, path: PathLike, content: str) -> None: ...

    @abstractmethod
    def mkdir(self, path: PathLike) -> None:
        """Create a directory and its parents; no-op if it exists."""

    @abstractmethod
    def symlink(self, source: PathLike, link: PathLike) -> None:
        """Create ``link`` pointing at ``source``."""

    @abstractmethod
    def remove(self, path: PathLike) -> None:
        """Remove a file or symlink; no-op when absent."""

    @abstractmethod
    def remove_tree(self, path: PathLike) -> None:
        """Remove a directory tree, file or symlink; no-op when absent."""

    @abstractmethod
    def copy(self, source: PathLike, destination: PathLike) -> None:
        """Copy a file or a whole directory tree."""

    @abstractmethod
    def make_executable(self, path: PathLike) -> None: ...

    # -- processes --------------------------------------------------------

    @abstractmethod
    def run(
        self,
        argv: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[PathLike] = None,
    ) -> ProcessResult:
        """Run an external program to completion."""

    # -- helpers shared by implementations --------------------------------

    def first_file(self, directory: PathLike) -> Optional[str]:
        """Return the first regular file (by name) directly inside ``directory``."""
        for name in self.list_dir(directory):
            candidate = f"{str(directory).rstrip('/')}/{name}"
            if self.is_file(candidate):
                return candidate
        return None


__all__ = ["Backend", "PathLike", "ProcessResult"]
