"""Repository registry loading.

Reads ``repos.json`` / ``repos.yaml`` / ``repos.yml`` from the dotfiles
root, falling back to the legacy ``repos.conf`` flat file. A dotfiles
tree without any of them simply has no external repositories.
"""
from __future__ import annotations

import logging
import re
from typing import List

from dotlayers.core.backend import Backend
from dotlayers.core.paths import path_expand
from dotlayers.core.repos.models import Repository
from dotlayers.core.schemas import REPOSITORIES, validate_document
from dotlayers.core.utils.io import read_config_text, read_document

logger = logging.getLogger(__name__)

STRUCTURED_FILES = ("repos.json", "repos.yaml", "repos.yml")
LEGACY_FILE = "repos.conf"

_LEGACY_LINE_RE = re.compile(r'^([A-Z_][A-Z0-9_]*)="([^|"]+)\|([^"]+)"$')


def _expand(path: str) -> str:
    return path_expand(path) if path else path


def parse_structured_repos(data: object, source: str) -> List[Repository]:
    if data is None:
        return []
    validate_document(data, REPOSITORIES, subject="Repositories", context={"path": source})
    repos: List[Repository] = []
    for item in data.get("repositories", []) or []:  # type: ignore[union-attr]
        repos.append(Repository.from_dict({**item, "path": _expand(item["path"])}))
    return repos


def parse_legacy_repos(text: str) -> List[Repository]:
    """Parse ``NAME="url|path"`` lines; anything else is ignored."""
    repos: List[Repository] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        match = _LEGACY_LINE_RE.match(line)
        if not match:
            logger.debug("Ignoring repos.conf line: %s", line)
            continue
        name, url, path = match.groups()
        repos.append(Repository(name=name, url=url, path=_expand(path)))
    return repos


def load_repositories(backend: Backend, dotfiles_dir: str) -> List[Repository]:
    """Load the repository registry of a dotfiles tree.

    Raises:
        ValidationError: If a structured registry file is malformed.
    """
    root = dotfiles_dir.rstrip("/")
    for filename in STRUCTURED_FILES:
        path = f"{root}/{filename}"
        if backend.is_file(path):
            return parse_structured_repos(read_document(backend, path), path)

    legacy = f"{root}/{LEGACY_FILE}"
    if backend.is_file(legacy):
        return parse_legacy_repos(read_config_text(backend, legacy))
    return []


__all__ = [
    "LEGACY_FILE",
    "STRUCTURED_FILES",
    "load_repositories",
    "parse_legacy_repos",
    "parse_structured_repos",
]
