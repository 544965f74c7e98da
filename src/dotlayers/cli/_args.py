"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_dotfiles_flag(parser: argparse.ArgumentParser) -> None:
    """Add -d/--dotfiles flag for the dotfiles root override.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--dotfiles",
        "-d",
        dest="dotfiles",
        type=str,
        help="Dotfiles root (default: $DOTFILES_DIR or ~/.dotfiles)",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be done without making changes",
    )


def add_logging_flags(parser: argparse.ArgumentParser) -> None:
    """Add mutually exclusive -v/--verbose and -q/--quiet flags."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only report warnings and errors",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add flags most commands use: --json, --dotfiles, --verbose/--quiet."""
    add_json_flag(parser)
    add_dotfiles_flag(parser)
    add_logging_flags(parser)


__all__ = [
    "add_dotfiles_flag",
    "add_dry_run_flag",
    "add_json_flag",
    "add_logging_flags",
    "add_standard_flags",
]
