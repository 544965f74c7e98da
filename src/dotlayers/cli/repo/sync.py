"""
dotlayers repo sync command.

SUMMARY: Clone missing external repositories
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

SUMMARY = "Clone missing external repositories"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "names",
        nargs="*",
        help="Repositories to sync (default: all configured)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Clone each requested repository unless it is already present."""
    from dotlayers.core.repos import RepoRegistry

    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        registry = RepoRegistry.load(get_backend(args), get_dotfiles_dir(args))
        names = args.names or registry.names()
        outcome = registry.ensure_many(names)
        failed = {name: err for name, err in outcome.items() if err}

        if formatter.json_mode:
            formatter.json_output(
                {
                    "synced": [name for name, err in outcome.items() if not err],
                    "failed": failed,
                }
            )
        else:
            for name, err in outcome.items():
                if err:
                    formatter.text(f"  {name}: failed - {err}")
                else:
                    formatter.text(f"  {name}: ok ({registry.get_path(name)})")
            formatter.text("")
            formatter.text(f"Synced {len(outcome) - len(failed)}/{len(outcome)} repositories")

        return 1 if failed else 0

    except DotlayersError as e:
        formatter.error(e, error_code="repo_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
