"""Backend operating on the real filesystem and real processes."""
from __future__ import annotations

import logging
import os
import shutil
import stat
import subprocess
import tempfile
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from dotlayers.core.backend.base import Backend, PathLike, ProcessResult
from dotlayers.core.exceptions import DependencyError

logger = logging.getLogger(__name__)


def _atomic_write(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write ``content`` to ``path`` via a temp file + fsync + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            dir=str(path.parent),
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(str(tmp_path), str(path))
        tmp_path = None
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()


class LocalBackend(Backend):
    """Production backend."""

    name = "local"

    def read_text(self, path: PathLike) -> str:
        return Path(path).read_text(encoding="utf-8")

    def exists(self, path: PathLike) -> bool:
        return os.path.lexists(path)

    def is_file(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: PathLike) -> bool:
        return Path(path).is_dir()

    def is_symlink(self, path: PathLike) -> bool:
        return Path(path).is_symlink()

    def readlink(self, path: PathLike) -> str:
        return os.readlink(path)

    def list_dir(self, path: PathLike) -> List[str]:
        p = Path(path)
        if not p.is_dir():
            return []
        return sorted(item.name for item in p.iterdir())

    def write_text(self, path: PathLike, content: str) -> None:
        p = Path(path)
        # Replacing a symlink must not write through to whatever it points at.
        if p.is_symlink():
            p.unlink()
        _atomic_write(p, content)

    def append_text(self, path: PathLike, content: str) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("a", encoding="utf-8") as f:
            f.write(content)

    def mkdir(self, path: PathLike) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def symlink(self, source: PathLike, link: PathLike) -> None:
        link_path = Path(link)
        link_path.parent.mkdir(parents=True, exist_ok=True)
        os.symlink(str(source), str(link_path))

    def remove(self, path: PathLike) -> None:
        p = Path(path)
        if p.is_symlink() or p.is_file():
            p.unlink()

    def remove_tree(self, path: PathLike) -> None:
        p = Path(path)
        if p.is_symlink() or p.is_file():
            p.unlink()
        elif p.is_dir():
            shutil.rmtree(p)

    def copy(self, source: PathLike, destination: PathLike) -> None:
        src = Path(source)
        dst = Path(destination)
        dst.parent.mkdir(parents=True, exist_ok=True)
        if src.is_dir() and not src.is_symlink():
            shutil.copytree(src, dst, symlinks=True)
        else:
            shutil.copy2(src, dst, follow_symlinks=False)

    def make_executable(self, path: PathLike) -> None:
        p = Path(path)
        mode = p.stat().st_mode
        p.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def run(
        self,
        argv: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[PathLike] = None,
    ) -> ProcessResult:
        logger.debug("Running: %s", " ".join(argv))
        try:
            completed = subprocess.run(
                list(argv),
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise DependencyError(
                f"Program not found: {argv[0]}", context={"argv": list(argv)}
            ) from e
        return ProcessResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


__all__ = ["LocalBackend"]
