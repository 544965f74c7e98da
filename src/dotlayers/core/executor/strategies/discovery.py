"""Locating the file a layer contributes."""
from __future__ import annotations

import posixpath
from typing import Optional, Tuple

from dotlayers.core.backend import Backend

GENERIC_NAMES = ("config", "init")


def find_layer_file(
    backend: Backend,
    layer_path: str,
    target_name: str,
    *,
    exclude_suffixes: Tuple[str, ...] = (),
) -> Optional[str]:
    """The layer's config file: exact target name, ``config``, ``init``, first file.

    A layer path that is itself a file is returned as-is. Files ending in
    one of ``exclude_suffixes`` are passed over by the first-file fallback.
    """
    if not layer_path:
        return None
    if backend.is_file(layer_path):
        return layer_path
    if not backend.is_dir(layer_path):
        return None
    for name in (target_name, *GENERIC_NAMES):
        candidate = posixpath.join(layer_path, name)
        if name and backend.is_file(candidate):
            return candidate
    if not exclude_suffixes:
        return backend.first_file(layer_path)
    for name in backend.list_dir(layer_path):
        candidate = posixpath.join(layer_path, name)
        if not name.endswith(exclude_suffixes) and backend.is_file(candidate):
            return candidate
    return None


def find_json_file(backend: Backend, layer_path: str, target_name: str) -> Optional[str]:
    """Like :func:`find_layer_file` but prefers JSON documents.

    Order: exact target name, ``config.json``, ``<target stem>.json``,
    ``config``, first ``*.json``, first file.
    """
    if not layer_path:
        return None
    if backend.is_file(layer_path):
        return layer_path
    if not backend.is_dir(layer_path):
        return None

    stem = posixpath.splitext(target_name)[0] or target_name
    for name in (target_name, "config.json", f"{stem}.json", "config"):
        candidate = posixpath.join(layer_path, name)
        if name and backend.is_file(candidate):
            return candidate

    for name in backend.list_dir(layer_path):
        candidate = posixpath.join(layer_path, name)
        if name.endswith(".json") and backend.is_file(candidate):
            return candidate
    return backend.first_file(layer_path)


__all__ = ["GENERIC_NAMES", "find_json_file", "find_layer_file"]
