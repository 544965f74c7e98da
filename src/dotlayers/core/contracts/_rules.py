"""Shared validation rules for the configuration contracts."""
from __future__ import annotations

import re
from typing import List

IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_-]+$")
REPO_NAME_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")

LOCAL_SOURCE = "local"
BUILTIN_PREFIX = "builtin:"


def is_identifier(value: str) -> bool:
    return bool(IDENTIFIER_RE.match(value or ""))


def is_layer_source(value: str) -> bool:
    """``local`` or an uppercase repository identifier."""
    return value == LOCAL_SOURCE or bool(REPO_NAME_RE.match(value or ""))


def is_builtin_hook(hook: str) -> bool:
    return hook.startswith(BUILTIN_PREFIX)


def builtin_name(hook: str) -> str:
    return hook[len(BUILTIN_PREFIX):]


def hook_errors(field: str, hook: str) -> List[str]:
    # Builtin references are dispatched by name and never executed as paths.
    if is_builtin_hook(hook):
        return []
    if any(ch.isspace() for ch in hook):
        return [f"{field} must not contain whitespace: {hook}"]
    return []


__all__ = [
    "IDENTIFIER_RE",
    "REPO_NAME_RE",
    "LOCAL_SOURCE",
    "BUILTIN_PREFIX",
    "is_identifier",
    "is_layer_source",
    "is_builtin_hook",
    "builtin_name",
    "hook_errors",
]
