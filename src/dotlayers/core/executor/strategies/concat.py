"""concat: append every layer's config file, in order, with headers."""
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


def layer_block(name: str, source: str, content: str) -> str:
    body = content.rstrip("\n")
    return f"# === Layer: {name} ===\n# Source: {source}\n\n{body}\n\n"


class ConcatStrategy(MergeStrategy):
    name = "concat"

    def merge(self, config: ToolConfig, context: StrategyContext) -> List[str]:
        self.require_layers(config)
        backend = context.backend
        target = self.target_path(config)
        target_name = posixpath.basename(target)

        blocks: List[str] = []
        for layer in config.layers:
            if not layer.resolved_path:
                logger.warning("Layer %s: not resolved", layer.name)
                continue
            found = find_layer_file(backend, layer.resolved_path, target_name)
            if found is None:
                logger.warning("No config file in layer: %s", layer.resolved_path)
                continue
            blocks.append(layer_block(layer.name, found, backend.read_text(found)))
            logger.debug("Appended: %s", layer.name)

        if not blocks:
            raise NotFoundError("No config files found in any layer")

        self.prepare_target(context, target)
        backend.write_text(target, "".join(blocks))
        logger.info("Concatenated config written: %s", target)
        return [target]


__all__ = ["ConcatStrategy", "layer_block"]
