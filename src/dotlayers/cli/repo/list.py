"""
dotlayers repo list command.

SUMMARY: List configured external repositories
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

SUMMARY = "List configured external repositories"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """List configured repositories."""
    from dotlayers.core.repos import RepoRegistry

    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        dotfiles_dir = get_dotfiles_dir(args)
        registry = RepoRegistry.load(get_backend(args), dotfiles_dir)

        repos = [
            {**registry.get(name).to_dict(), "cloned": registry.exists(name)}
            for name in registry.names()
        ]

        if formatter.json_mode:
            formatter.json_output({"repositories": repos})
            return 0

        if not repos:
            formatter.text("No external repositories configured.")
            formatter.text("")
            formatter.text(f"Add them in {dotfiles_dir}/repos.json:")
            formatter.text('  {"repositories": [')
            formatter.text('    {"name": "WORK", "url": "git@host:org/dotfiles.git",')
            formatter.text('     "path": "~/.dotfiles-work"}')
            formatter.text("  ]}")
            return 0

        formatter.text(f"Configured repositories ({len(repos)}):")
        formatter.text("")
        for repo in repos:
            formatter.text(f"  {repo['name']}")
            formatter.text(f"    URL:    {repo['url']}")
            formatter.text(f"    Path:   {repo['path']}")
            formatter.text(f"    Status: {'cloned' if repo['cloned'] else 'not cloned'}")
            formatter.text("")
        return 0

    except DotlayersError as e:
        formatter.error(e, error_code="repo_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
