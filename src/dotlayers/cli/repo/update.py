"""
dotlayers repo update command.

SUMMARY: Fast-forward cloned external repositories
"""
from __future__ import annotations

import argparse

from dotlayers.cli import (
    OutputFormatter,
    add_standard_flags,
    get_backend,
    get_dotfiles_dir,
    setup_logging,
)
from dotlayers.core.exceptions import DotlayersError

SUMMARY = "Fast-forward cloned external repositories"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "names",
        nargs="*",
        help="Repositories to update (default: every cloned repository)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Run ``git pull --ff-only`` in each repository."""
    from dotlayers.core.repos import RepoRegistry

    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        registry = RepoRegistry.load(get_backend(args), get_dotfiles_dir(args))
        names = args.names or [name for name in registry.names() if registry.exists(name)]

        updated = []
        failed = {}
        for name in names:
            try:
                registry.update(name)
                updated.append(name)
            except DotlayersError as e:
                failed[name] = str(e)

        if formatter.json_mode:
            formatter.json_output({"updated": updated, "failed": failed})
        else:
            for name in updated:
                formatter.text(f"  {name}: updated")
            for name, err in failed.items():
                formatter.text(f"  {name}: failed - {err}")
            if not names:
                formatter.text("No cloned repositories to update.")

        return 1 if failed else 0

    except DotlayersError as e:
        formatter.error(e, error_code="repo_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
