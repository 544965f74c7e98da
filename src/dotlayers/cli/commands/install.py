"""
dotlayers install command.

SUMMARY: Install a machine profile (or a single tool)
"""
from __future__ import annotations

import argparse

from dotlayers.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_standard_flags,
    get_backend,
    get_dotfiles_dir,
    require_dotfiles_layout,
    setup_logging,
)
from dotlayers.core.exceptions import DotlayersError

SUMMARY = "Install a machine profile (or a single tool)"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "profile",
        nargs="?",
        help="Machine profile name (from machines/) or path to a profile file",
    )
    parser.add_argument(
        "--list",
        "-l",
        action="store_true",
        help="List available machine profiles and exit",
    )
    parser.add_argument(
        "--tool",
        "-t",
        help=(
            "Only install this tool. With a profile, the layers that profile "
            "requests for the tool apply; otherwise every declared layer is used"
        ),
    )
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def _list_profiles(formatter: OutputFormatter, backend, dotfiles_dir: str) -> int:
    from dotlayers.core.config import list_profiles

    profiles = list_profiles(backend, dotfiles_dir)
    if formatter.json_mode:
        formatter.json_output({"profiles": profiles})
    elif not profiles:
        formatter.text(f"No machine profiles found in {dotfiles_dir}/machines")
    else:
        formatter.text("Available profiles:")
        for name in profiles:
            formatter.text(f"  {name}")
    return 0


def main(args: argparse.Namespace) -> int:
    """Run the layering pipeline."""
    from dotlayers.core.orchestrator import Orchestrator

    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        backend = get_backend(args)
        dotfiles_dir = get_dotfiles_dir(args)
        require_dotfiles_layout(backend, dotfiles_dir)

        if args.list:
            return _list_profiles(formatter, backend, dotfiles_dir)

        if not args.profile and not args.tool:
            formatter.error(ValueError("a profile name (or --tool) is required"))
            return 1

        orchestrator = Orchestrator(backend)
        orchestrator.init(dotfiles_dir, dry_run=args.dry_run, verbose=args.verbose)

        if args.tool:
            machine, layers = "", []
            if args.profile:
                profile = orchestrator.load_profile(args.profile)
                machine = profile.profile_name
                layers = profile.get_tool_layers(args.tool)
            result = orchestrator.run_tool(args.tool, machine=machine, layers=layers)
        else:
            result = orchestrator.run(args.profile)

        formatter.run_summary(result)

        return 0 if result.success else 1

    except DotlayersError as e:
        formatter.error(e, error_code="install_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
