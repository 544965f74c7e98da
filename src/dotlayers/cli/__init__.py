"""
dotlayers CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (repo/, backup/) and root commands (commands/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import (
    add_dotfiles_flag,
    add_dry_run_flag,
    add_json_flag,
    add_logging_flags,
    add_standard_flags,
)
from ._utils import (
    get_backend,
    get_dotfiles_dir,
    require_dotfiles_layout,
    setup_logging,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_dotfiles_flag",
    "add_dry_run_flag",
    "add_json_flag",
    "add_logging_flags",
    "add_standard_flags",
    # Utilities
    "get_backend",
    "get_dotfiles_dir",
    "require_dotfiles_layout",
    "setup_logging",
]
