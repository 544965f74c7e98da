"""
dotlayers backup list command.

SUMMARY: List stored backups
"""
from __future__ import annotations

import argparse

from dotlayers.cli import OutputFormatter, add_standard_flags, setup_logging
from dotlayers.cli.backup._common import get_backup_manager
from dotlayers.core.exceptions import DotlayersError

SUMMARY = "List stored backups"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """List backups, newest last."""
    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_backup_manager(args)
        entries = manager.list_backups()

        if formatter.json_mode:
            formatter.json_output(
                {
                    "backup_dir": manager.backup_dir,
                    "backups": [
                        {
                            "name": e.name,
                            "path": e.path,
                            "original_name": e.original_name,
                            "created_at": e.created_at.isoformat() if e.created_at else None,
                        }
                        for e in entries
                    ],
                }
            )
            return 0

        if not entries:
            formatter.text(f"No backups in {manager.backup_dir}")
            return 0

        formatter.text(f"Backups in {manager.backup_dir} ({len(entries)}):")
        for entry in entries:
            when = entry.created_at.strftime("%Y-%m-%d %H:%M:%S") if entry.created_at else "?"
            formatter.text(f"  {entry.name}  ({entry.original_name}, {when})")
        return 0

    except DotlayersError as e:
        formatter.error(e, error_code="backup_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
