"""In-memory backend that records every mutating call.

Used by tests and by anything that needs to exercise the full pipeline
without touching the real filesystem or spawning processes. Paths are
treated as POSIX strings; symlinks are followed component by component
the same way the kernel does.
"""
from __future__ import annotations

import posixpath
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from dotlayers.core.backend.base import Backend, PathLike, ProcessResult

_MAX_LINK_DEPTH = 40


def _norm(path: PathLike) -> str:
    text = str(path)
    if not text:
        return text
    return posixpath.normpath(text)


class MemoryBackend(Backend):
    """Deterministic test double for :class:`Backend`."""

    name = "memory"

    def __init__(self) -> None:
        self._files: Dict[str, str] = {}
        self._dirs: Set[str] = {"/"}
        self._links: Dict[str, str] = {}
        self._executable: Set[str] = set()
        self._process_results: List[Tuple[str, ProcessResult]] = []
        self.calls: List[str] = []
        self.processes: List[Dict[str, object]] = []

    # -- seeding helpers (not recorded) -----------------------------------

    def set_file(self, path: PathLike, content: str = "") -> None:
        key = _norm(path)
        self._add_parents(key)
        self._links.pop(key, None)
        self._files[key] = content

    def set_dir(self, path: PathLike) -> None:
        key = _norm(path)
        self._add_parents(key)
        self._dirs.add(key)

    def set_symlink(self, link: PathLike, target: PathLike) -> None:
        key = _norm(link)
        self._add_parents(key)
        self._files.pop(key, None)
        self._links[key] = str(target)

    def set_process_result(
        self, command_prefix: str, returncode: int, stdout: str = "", stderr: str = ""
    ) -> None:
        """Make runs whose joined argv starts with ``command_prefix`` return this."""
        self._process_results.insert(
            0, (command_prefix, ProcessResult(returncode, stdout, stderr))
        )

    def get(self, path: PathLike) -> Optional[str]:
        """Content of a file (following links), or ``None``."""
        resolved = self._resolve(_norm(path))
        return self._files.get(resolved)

    def is_executable(self, path: PathLike) -> bool:
        return self._resolve(_norm(path)) in self._executable

    def mutations(self, path_prefix: str = "") -> List[str]:
        """Recorded calls whose first path starts with ``path_prefix``."""
        if not path_prefix:
            return list(self.calls)
        result = []
        for call in self.calls:
            _, _, rest = call.partition(":")
            if rest.startswith(path_prefix):
                result.append(call)
        return result

    def clear_calls(self) -> None:
        self.calls.clear()
        self.processes.clear()

    # -- internals --------------------------------------------------------

    def _add_parents(self, key: str) -> None:
        parent = posixpath.dirname(key)
        while parent and parent not in self._dirs:
            self._dirs.add(parent)
            next_parent = posixpath.dirname(parent)
            if next_parent == parent:
                break
            parent = next_parent

    def _resolve(self, key: str, depth: int = 0) -> str:
        """Follow symlinks in every component of ``key``."""
        if depth > _MAX_LINK_DEPTH or not key.startswith("/"):
            return key
        current = "/"
        parts = [p for p in key.split("/") if p]
        for index, part in enumerate(parts):
            current = posixpath.join(current, part)
            if current in self._links:
                target = self._links[current]
                if not target.startswith("/"):
                    target = posixpath.join(posixpath.dirname(current), target)
                rest = parts[index + 1:]
                joined = posixpath.join(_norm(target), *rest) if rest else _norm(target)
                return self._resolve(joined, depth + 1)
        return current

    def _lexists(self, key: str) -> bool:
        return key in self._files or key in self._dirs or key in self._links

    # -- reading ----------------------------------------------------------

    def read_text(self, path: PathLike) -> str:
        resolved = self._resolve(_norm(path))
        if resolved not in self._files:
            raise FileNotFoundError(str(path))
        return self._files[resolved]

    def exists(self, path: PathLike) -> bool:
        key = _norm(path)
        if key in self._links:
            return True
        return self._lexists(self._resolve(key))

    def is_file(self, path: PathLike) -> bool:
        return self._resolve(_norm(path)) in self._files

    def is_dir(self, path: PathLike) -> bool:
        return self._resolve(_norm(path)) in self._dirs

    def is_symlink(self, path: PathLike) -> bool:
        return _norm(path) in self._links

    def readlink(self, path: PathLike) -> str:
        key = _norm(path)
        if key not in self._links:
            raise OSError(f"Not a symlink: {path}")
        return self._links[key]

    def list_dir(self, path: PathLike) -> List[str]:
        directory = self._resolve(_norm(path))
        if directory not in self._dirs:
            return []
        names = set()
        for key in (*self._files, *self._dirs, *self._links):
            if key != directory and posixpath.dirname(key) == directory:
                names.add(posixpath.basename(key))
        return sorted(names)

    # -- mutation ---------------------------------------------------------

    def write_text(self, path: PathLike, content: str) -> None:
        key = _norm(path)
        self.calls.append(f"write:{key}")
        self._links.pop(key, None)
        resolved = self._resolve(key)
        self._add_parents(resolved)
        self._files[resolved] = content

    def append_text(self, path: PathLike, content: str) -> None:
        key = _norm(path)
        self.calls.append(f"append:{key}")
        resolved = self._resolve(key)
        self._add_parents(resolved)
        self._files[resolved] = self._files.get(resolved, "") + content

    def mkdir(self, path: PathLike) -> None:
        key = _norm(path)
        self.calls.append(f"mkdir:{key}")
        if key in self._files:
            raise FileExistsError(str(path))
        self._add_parents(key)
        self._dirs.add(key)

    def symlink(self, source: PathLike, link: PathLike) -> None:
        key = _norm(link)
        self.calls.append(f"symlink:{source}->{key}")
        if self._lexists(key):
            raise FileExistsError(str(link))
        self._add_parents(key)
        self._links[key] = str(source)

    def remove(self, path: PathLike) -> None:
        key = _norm(path)
        self.calls.append(f"remove:{key}")
        self._links.pop(key, None)
        self._files.pop(key, None)
        self._executable.discard(key)

    def remove_tree(self, path: PathLike) -> None:
        key = _norm(path)
        self.calls.append(f"remove_tree:{key}")
        if key in self._links or key in self._files:
            self._links.pop(key, None)
            self._files.pop(key, None)
            return
        prefix = key.rstrip("/") + "/"
        for store in (self._files, self._links):
            for item in [k for k in store if k.startswith(prefix)]:
                del store[item]
        self._dirs = {d for d in self._dirs if d != key and not d.startswith(prefix)}
        self._executable = {e for e in self._executable if not e.startswith(prefix)}

    def copy(self, source: PathLike, destination: PathLike) -> None:
        src = _norm(source)
        dst = _norm(destination)
        self.calls.append(f"copy:{src}->{dst}")
        if src in self._links:
            self._add_parents(dst)
            self._links[dst] = self._links[src]
            return
        resolved = self._resolve(src)
        if resolved in self._files:
            self._add_parents(dst)
            self._files[dst] = self._files[resolved]
            return
        if resolved not in self._dirs:
            raise FileNotFoundError(str(source))
        prefix = resolved.rstrip("/") + "/"
        self._add_parents(dst)
        self._dirs.add(dst)
        for d in [d for d in self._dirs if d.startswith(prefix)]:
            self._dirs.add(dst + "/" + d[len(prefix):])
        for k, v in [(k, v) for k, v in self._files.items() if k.startswith(prefix)]:
            self._files[dst + "/" + k[len(prefix):]] = v
        for k, v in [(k, v) for k, v in self._links.items() if k.startswith(prefix)]:
            self._links[dst + "/" + k[len(prefix):]] = v

    def make_executable(self, path: PathLike) -> None:
        key = _norm(path)
        self.calls.append(f"chmod:{key}")
        resolved = self._resolve(key)
        if resolved not in self._files:
            raise FileNotFoundError(str(path))
        self._executable.add(resolved)

    # -- processes --------------------------------------------------------

    def run(
        self,
        argv: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[PathLike] = None,
    ) -> ProcessResult:
        command = " ".join(argv)
        self.calls.append(f"run:{command}")
        self.processes.append(
            {
                "argv": list(argv),
                "env": dict(env) if env is not None else None,
                "cwd": str(cwd) if cwd is not None else None,
            }
        )
        for prefix, result in self._process_results:
            if command.startswith(prefix):
                return result
        return ProcessResult(returncode=0)


__all__ = ["MemoryBackend"]
