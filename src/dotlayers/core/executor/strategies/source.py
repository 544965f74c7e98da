"""source: generate a shell file that sources each layer's file.

Optional ``<file>.pre`` companions are gathered from every layer and
sourced in one block ahead of all the regular layer statements.
"""
from __future__ import annotations

import logging
import posixpath
from typing import List

from dotlayers.core.contracts import ToolConfig
from dotlayers.core.exceptions import NotFoundError
from dotlayers.core.executor.context import StrategyContext
from dotlayers.core.executor.strategies.base import MergeStrategy
from dotlayers.core.executor.strategies.discovery import find_layer_file

logger = logging.getLogger(__name__)

HEADER = (
    "# Auto-generated by dotfiles layering system\n"
    "# This file sources configs from multiple layers\n"
)
PRE_SUFFIX = ".pre"


def source_line(path: str) -> str:
    return f'[ -f "{path}" ] && source "{path}"'


class SourceStrategy(MergeStrategy):
    name = "source"

    def merge(self, config: ToolConfig, context: StrategyContext) -> List[str]:
        self.require_layers(config)
        backend = context.backend
        target = self.target_path(config)
        target_name = posixpath.basename(target)

        pre_files: List[str] = []
        layer_lines: List[str] = []
        for layer in config.layers:
            if not layer.resolved_path:
                logger.warning("Layer %s: not resolved", layer.name)
                continue

            if backend.is_dir(layer.resolved_path):
                pre = posixpath.join(layer.resolved_path, target_name + PRE_SUFFIX)
            else:
                pre = layer.resolved_path + PRE_SUFFIX
            if backend.is_file(pre):
                pre_files.append(pre)

            found = find_layer_file(
                backend, layer.resolved_path, target_name, exclude_suffixes=(PRE_SUFFIX,)
            )
            if found is None or found.endswith(PRE_SUFFIX):
                logger.warning("No config file in layer: %s", layer.resolved_path)
                continue
            layer_lines.append(f"\n# Layer: {layer.name}\n{source_line(found)}\n")
            logger.debug("Added source for layer: %s", layer.name)

        if not layer_lines:
            raise NotFoundError("No config files found in any layer")

        parts = [HEADER]
        if pre_files:
            parts.append("\n# Pre-init\n")
            parts.extend(source_line(pre) + "\n" for pre in pre_files)
        parts.extend(layer_lines)

        self.prepare_target(context, target)
        backend.write_text(target, "".join(parts))
        backend.make_executable(target)
        logger.info("Source config written: %s", target)
        return [target]


__all__ = ["HEADER", "SourceStrategy", "source_line"]
