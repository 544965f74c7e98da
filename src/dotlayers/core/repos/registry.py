"""External repository registry.

Tracks ``{name -> (url, local path)}`` and performs the only git side
effects in the pipeline (clone and pull). Both go through the backend's
``run`` so tests can replace them with recorded no-ops.
"""
from __future__ import annotations

import logging
import posixpath
from typing import Dict, Iterable, List, Optional

from dotlayers.core.backend import Backend
from dotlayers.core.exceptions import DependencyError, InvalidInputError, NotFoundError
from dotlayers.core.repos.config import load_repositories
from dotlayers.core.repos.models import Repository

logger = logging.getLogger(__name__)


class RepoRegistry:
    """Lookup, clone and update for external layer repositories."""

    def __init__(self, backend: Backend, repositories: Iterable[Repository] = ()) -> None:
        self.backend = backend
        self._repos: Dict[str, Repository] = {}
        for repo in repositories:
            self.add(repo)

    @classmethod
    def load(cls, backend: Backend, dotfiles_dir: str) -> RepoRegistry:
        return cls(backend, load_repositories(backend, dotfiles_dir))

    def add(self, repo: Repository) -> None:
        self._repos[repo.name] = repo

    def _get(self, name: str) -> Repository:
        if not name:
            raise InvalidInputError("repository name is required")
        repo = self._repos.get(name)
        if repo is None:
            raise NotFoundError(
                f"Repository not configured: {name}", context={"repository": name}
            )
        return repo

    # -- lookup -----------------------------------------------------------

    def get(self, name: str) -> Repository:
        return self._get(name)

    def get_path(self, name: str) -> str:
        return self._get(name).path

    def get_url(self, name: str) -> str:
        return self._get(name).url

    def is_configured(self, name: str) -> bool:
        return name in self._repos

    def names(self) -> List[str]:
        return sorted(self._repos)

    def __len__(self) -> int:
        return len(self._repos)

    def exists(self, name: str) -> bool:
        """True when the local checkout has a ``.git`` directory."""
        repo = self._get(name)
        return self.backend.is_dir(posixpath.join(repo.path, ".git"))

    # -- side effects -----------------------------------------------------

    def ensure(self, name: str) -> str:
        """Clone ``name`` unless it is already present; return its path."""
        repo = self._get(name)
        if self.exists(name):
            logger.debug("Repository %s already present at %s", name, repo.path)
            return repo.path

        logger.info("Cloning %s into %s", name, repo.path)
        self.backend.mkdir(posixpath.dirname(repo.path.rstrip("/")) or "/")
        result = self.backend.run(["git", "clone", repo.url, repo.path])
        if not result.ok:
            raise DependencyError(
                f"Failed to clone {name} from {repo.url}",
                context={"repository": name, "stderr": result.stderr.strip()},
            )
        return repo.path

    def update(self, name: str) -> None:
        """Fast-forward an existing checkout."""
        repo = self._get(name)
        if not self.exists(name):
            raise NotFoundError(
                f"Repository not cloned: {name} ({repo.path})",
                context={"repository": name},
            )
        logger.info("Updating %s", name)
        result = self.backend.run(["git", "pull", "--ff-only"], cwd=repo.path)
        if not result.ok:
            raise DependencyError(
                f"Failed to update {name}",
                context={"repository": name, "stderr": result.stderr.strip()},
            )

    def ensure_many(self, names: Iterable[str]) -> Dict[str, Optional[str]]:
        """Ensure each configured repository; failures are logged, not raised.

        Returns:
            Mapping of repository name to error message (``None`` on success).
        """
        outcome: Dict[str, Optional[str]] = {}
        for name in names:
            if name in outcome:
                continue
            try:
                self.ensure(name)
                outcome[name] = None
            except (NotFoundError, DependencyError) as e:
                logger.warning("Could not prepare repository %s: %s", name, e)
                outcome[name] = str(e)
        return outcome


__all__ = ["RepoRegistry"]
