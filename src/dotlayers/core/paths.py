"""Pure path helpers.

Everything here is string manipulation only: no filesystem access, so the
results are identical under every backend. ``~`` is only expanded at the
start of a path, and unset environment variables expand to the empty
string instead of being left as literal text.
"""
from __future__ import annotations

import os
import re
from typing import List, Mapping, Optional

from dotlayers.core.exceptions import InvalidInputError

_VAR_RE = re.compile(
    r"\$\{(?P<dname>[A-Za-z_][A-Za-z0-9_]*):-(?P<default>[^}]*)\}"
    r"|\$\{(?P<bname>[A-Za-z_][A-Za-z0-9_]*)\}"
    r"|\$(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
)


def _require(path: str, what: str = "path") -> None:
    if not path:
        raise InvalidInputError(f"{what} is required")


def _home(env: Optional[Mapping[str, str]]) -> str:
    source = os.environ if env is None else env
    return source.get("HOME") or os.path.expanduser("~")


def path_expand_tilde(path: str, env: Optional[Mapping[str, str]] = None) -> str:
    """Expand a leading ``~`` or ``~/``; tildes elsewhere are left alone."""
    _require(path)
    if path == "~":
        return _home(env)
    if path.startswith("~/"):
        return _home(env).rstrip("/") + path[1:]
    return path


def path_expand_vars(path: str, env: Optional[Mapping[str, str]] = None) -> str:
    """Expand ``${VAR:-default}``, ``${VAR}`` and ``$VAR`` in one pass."""
    source = os.environ if env is None else env

    def _sub(match: re.Match[str]) -> str:
        if match.group("dname"):
            value = source.get(match.group("dname"), "")
            return value if value else match.group("default")
        name = match.group("bname") or match.group("name")
        return source.get(name, "")

    return _VAR_RE.sub(_sub, path)


def path_expand(path: str, env: Optional[Mapping[str, str]] = None) -> str:
    """Tilde expansion followed by environment variable expansion."""
    return path_expand_vars(path_expand_tilde(path, env), env)


def path_normalize(path: str) -> str:
    """Collapse ``//``, drop ``.`` segments and resolve ``..`` lexically.

    ``/a//b/../c/`` becomes ``/a/c``. A leading ``..`` is dropped for
    absolute paths and kept for relative ones. Idempotent.
    """
    _require(path)
    absolute = path.startswith("/")
    segments: List[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments and segments[-1] != "..":
                segments.pop()
            elif not absolute:
                segments.append("..")
            continue
        segments.append(segment)

    joined = "/".join(segments)
    if absolute:
        return "/" + joined
    return joined or "."


def path_is_absolute(path: str) -> bool:
    """True for ``/...`` and home-relative ``~...`` paths."""
    return path.startswith(("/", "~"))


def path_join(base: str, other: str) -> str:
    """Join two paths; an absolute ``other`` replaces ``base``."""
    _require(base, "base path")
    if not other:
        return base
    if other.startswith("/"):
        return other
    return base.rstrip("/") + "/" + other


def path_resolve_relative(base: str, relative: str) -> str:
    return path_normalize(path_join(base, relative))


__all__ = [
    "path_expand",
    "path_expand_tilde",
    "path_expand_vars",
    "path_is_absolute",
    "path_join",
    "path_normalize",
    "path_resolve_relative",
]
