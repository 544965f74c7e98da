"""
dotlayers backup cleanup command.

SUMMARY: Delete backups older than N days
"""
from __future__ import annotations

import argparse

from dotlayers.cli import OutputFormatter, add_standard_flags, setup_logging
from dotlayers.cli.backup._common import get_backup_manager
from dotlayers.core.exceptions import DotlayersError

SUMMARY = "Delete backups older than N days"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--days",
        type=int,
        default=30,
        help="Age threshold in days (default: 30)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Prune old backups."""
    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        removed = get_backup_manager(args).cleanup(args.days)
        formatter.success(
            {"removed": removed, "days": args.days},
            f"Removed {len(removed)} backup(s) older than {args.days} days",
        )
        return 0

    except DotlayersError as e:
        formatter.error(e, error_code="backup_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
