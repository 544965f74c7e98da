"""
dotlayers - layered dotfiles composition

dotlayers builds each tool's configuration file from an ordered stack of
layers (local trees and git-backed external trees) using a per-tool merge
strategy, backing up whatever it replaces.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
