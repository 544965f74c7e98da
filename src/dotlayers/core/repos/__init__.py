"""External git-backed layer repositories."""
from __future__ import annotations

from dotlayers.core.repos.config import load_repositories
from dotlayers.core.repos.models import Repository
from dotlayers.core.repos.registry import RepoRegistry

__all__ = ["RepoRegistry", "Repository", "load_repositories"]
