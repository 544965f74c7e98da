"""
dotlayers tools command.

SUMMARY: List tool definitions and their layers
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

SUMMARY = "List tool definitions and their layers"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """List tools, validating each definition."""
    from dotlayers.core.config import build_tool_config, list_tools, parse_tool_definition

    setup_logging(args)
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        backend = get_backend(args)
        dotfiles_dir = get_dotfiles_dir(args)
        entries = []
        for name in list_tools(backend, dotfiles_dir):
            tool_dir = f"{dotfiles_dir}/tools/{name}"
            entry = {"name": name, "valid": True, "errors": [], "target": "", "layers": []}
            try:
                config = build_tool_config(parse_tool_definition(backend, tool_dir), tool_dir)
                entry["target"] = config.target
                entry["merge_hook"] = config.merge_hook
                entry["layers"] = [layer.spec for layer in config.layers]
            except DotlayersError as e:
                entry["valid"] = False
                entry["errors"] = getattr(e, "errors", [str(e)])
            entries.append(entry)

        if formatter.json_mode:
            formatter.json_output({"tools": entries})
            return 0

        if not entries:
            formatter.text(f"No tool definitions found in {dotfiles_dir}/tools")
            return 0

        formatter.text(f"Tools ({len(entries)}):")
        formatter.text("")
        for entry in entries:
            formatter.text(f"  {entry['name']}")
            if entry["valid"]:
                formatter.text(f"    Target: {entry['target']}")
                formatter.text(f"    Merge:  {entry['merge_hook']}")
                for spec in entry["layers"]:
                    formatter.text(f"    Layer:  {spec}")
            else:
                for err in entry["errors"]:
                    formatter.text(f"    Invalid: {err}")
        return 0

    except DotlayersError as e:
        formatter.error(e, error_code="tool_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
