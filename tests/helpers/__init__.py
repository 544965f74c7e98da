"""Test helper modules for the dotlayers test suite.

- dotfiles: builders that lay out tool definitions, profiles and layers on
  a MemoryBackend (or a real directory for LocalBackend tests)
"""
from __future__ import annotations

from helpers.dotfiles import (
    add_layer_file,
    add_profile,
    add_repos,
    add_tool,
    write_json,
)

__all__ = [
    "add_layer_file",
    "add_profile",
    "add_repos",
    "add_tool",
    "write_json",
]
