"""Base class for builtin merge strategies.

Every builtin shares one contract:

- at least one layer is required (``InvalidInputError`` otherwise)
- the target is tilde/env expanded and its parent directory created
- anything already at the target is backed up before it is replaced; a
  failed backup aborts with ``BackupError`` and leaves the target alone
- on success the target is reported in ``files_modified``

Subclasses implement :meth:`MergeStrategy.merge` and raise
``DotlayersError`` subclasses for failures; ``__call__`` converts both
outcomes into a ``HookResult``.
"""
from __future__ import annotations

import logging
import posixpath
from abc import ABC, abstractmethod
from typing import List

from dotlayers.core.contracts import HookResult, ToolConfig
from dotlayers.core.exceptions import DotlayersError, ErrorCode, InvalidInputError, code_of
from dotlayers.core.executor.context import StrategyContext
from dotlayers.core.paths import path_expand, path_normalize

logger = logging.getLogger(__name__)


class MergeStrategy(ABC):
    """Abstract builtin strategy."""

    name: str = ""

    def __call__(self, config: ToolConfig, context: StrategyContext) -> HookResult:
        try:
            files = self.merge(config, context)
        except DotlayersError as e:
            logger.error("%s: %s", self.name, e)
            return HookResult.failure(e.code, str(e))
        except OSError as e:
            logger.error("%s: %s", self.name, e)
            return HookResult.failure(code_of(e), str(e))
        except UnicodeDecodeError as e:
            # Binary files (.DS_Store and friends) inside a layer directory.
            logger.error("%s: layer file is not UTF-8 text: %s", self.name, e)
            return HookResult.failure(
                ErrorCode.VALIDATION, f"Layer file is not UTF-8 text: {e}"
            )
        result = HookResult.ok()
        for path in files:
            result.add_file(path)
        return result

    @abstractmethod
    def merge(self, config: ToolConfig, context: StrategyContext) -> List[str]:
        """Build the target; return the paths written."""

    # -- shared steps -----------------------------------------------------

    @staticmethod
    def require_layers(config: ToolConfig) -> None:
        if config.layer_count == 0:
            raise InvalidInputError("No layers defined", context={"tool": config.tool_name})

    @staticmethod
    def target_path(config: ToolConfig) -> str:
        return path_normalize(path_expand(config.target))

    @staticmethod
    def prepare_target(context: StrategyContext, target: str) -> None:
        """Create the parent directory, then back up and clear the target."""
        backend = context.backend
        backend.mkdir(posixpath.dirname(target) or "/")
        if context.backup.back_up_if_exists(target) is not None:
            backend.remove_tree(target)


__all__ = ["MergeStrategy"]
