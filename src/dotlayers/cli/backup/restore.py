"""
dotlayers backup restore command.

SUMMARY: Restore a backup over its original location
"""
from __future__ import annotations

import argparse

from dotlayers.cli import OutputFormatter, add_standard_flags, setup_logging
from dotlayers.cli.backup._common import get_backup_manager
from dotlayers.core.exceptions import DotlayersError
from dotlayers.core.paths import path_expand

SUMMARY = "Restore a backup over its original location"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("backup", help="Backup name (from 'backup list') or path")
    parser.add_argument("target", help="Path to restore to (e.g. ~/.gitconfig)")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Restore one backup."""
    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_backup_manager(args)
        target = path_expand(args.target)
        manager.restore(args.backup, target)
        formatter.success(
            {"backup": args.backup, "target": target},
            f"Restored {target} from {args.backup}",
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
