"""
dotlayers profiles command.

SUMMARY: List machine profiles and the tools they install
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

SUMMARY = "List machine profiles and the tools they install"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """List profiles."""
    from dotlayers.core.config import describe_profile, list_profiles

    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        backend = get_backend(args)
        dotfiles_dir = get_dotfiles_dir(args)
        entries = []
        for name in list_profiles(backend, dotfiles_dir):
            machine = describe_profile(backend, dotfiles_dir, name)
            entries.append(
                {
                    "name": name,
                    "valid": machine is not None,
                    "tools": {t: machine.get_tool_layers(t) for t in machine.tools}
                    if machine is not None
                    else {},
                }
            )

        if formatter.json_mode:
            formatter.json_output({"profiles": entries})
            return 0

        if not entries:
            formatter.text(f"No machine profiles found in {dotfiles_dir}/machines")
            return 0

        formatter.text(f"Machine profiles ({len(entries)}):")
        formatter.text("")
        for entry in entries:
            status = "" if entry["valid"] else " (invalid)"
            formatter.text(f"  {entry['name']}{status}")
            for tool, layers in entry["tools"].items():
                formatter.text(f"    {tool}: {' '.join(layers) or '(all layers)'}")
        return 0

    except DotlayersError as e:
        formatter.error(e, error_code="profile_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
