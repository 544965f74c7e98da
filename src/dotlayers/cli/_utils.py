"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
import os

from dotlayers.core.backend import Backend, LocalBackend
from dotlayers.core.exceptions import InvalidInputError
from dotlayers.core.logging_config import configure_logging
from dotlayers.core.paths import path_expand, path_normalize

DEFAULT_DOTFILES_DIR = "~/.dotfiles"
DOTFILES_ENV_VAR = "DOTFILES_DIR"


def get_dotfiles_dir(args: argparse.Namespace) -> str:
    """Dotfiles root from ``--dotfiles``, ``$DOTFILES_DIR`` or the default."""
    explicit = getattr(args, "dotfiles", None)
    chosen = explicit or os.environ.get(DOTFILES_ENV_VAR) or DEFAULT_DOTFILES_DIR
    return path_normalize(path_expand(chosen))


def get_backend(args: argparse.Namespace) -> Backend:
    """Backend for a command; tests inject one via ``args.backend``."""
    backend = getattr(args, "backend", None)
    return backend if backend is not None else LocalBackend()


def require_dotfiles_layout(backend: Backend, dotfiles_dir: str) -> None:
    """Ensure the root looks like a dotfiles tree (``machines/`` and ``tools/``).

    Raises:
        InvalidInputError: Naming every missing directory.
    """
    missing = [
        name for name in ("machines", "tools") if not backend.is_dir(f"{dotfiles_dir}/{name}")
    ]
    if not backend.is_dir(dotfiles_dir):
        raise InvalidInputError(f"Dotfiles directory not found: {dotfiles_dir}")
    if missing:
        raise InvalidInputError(
            f"Not a dotfiles directory (missing {', '.join(m + '/' for m in missing)}): "
            f"{dotfiles_dir}"
        )


def setup_logging(args: argparse.Namespace) -> None:
    configure_logging(
        verbose=bool(getattr(args, "verbose", False)),
        quiet=bool(getattr(args, "quiet", False)),
    )


__all__ = [
    "DEFAULT_DOTFILES_DIR",
    "DOTFILES_ENV_VAR",
    "get_backend",
    "get_dotfiles_dir",
    "require_dotfiles_layout",
    "setup_logging",
]
