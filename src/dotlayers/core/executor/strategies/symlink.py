"""symlink: link the highest-priority layer into place.

Only the last layer is used; earlier layers are ignored entirely. A
directory layer is linked as a whole, otherwise the layer's config file
is located and linked.
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


class SymlinkStrategy(MergeStrategy):
    name = "symlink"

    def merge(self, config: ToolConfig, context: StrategyContext) -> List[str]:
        self.require_layers(config)
        backend = context.backend
        layer = config.layers[-1]

        if not layer.resolved_path:
            raise NotFoundError(f"Layer not resolved: {layer.name}")
        if not backend.exists(layer.resolved_path):
            raise NotFoundError(f"Layer path not found: {layer.resolved_path}")

        target = self.target_path(config)
        if backend.is_dir(layer.resolved_path):
            source = layer.resolved_path
            logger.debug("Layer is directory: %s", source)
        else:
            found = find_layer_file(backend, layer.resolved_path, posixpath.basename(target))
            if found is None:
                raise NotFoundError(
                    f"Could not find config file in layer: {layer.resolved_path}"
                )
            source = found

        self.prepare_target(context, target)
        backend.symlink(source, target)
        logger.info("Symlinked: %s -> %s", target, source)
        return [target]


__all__ = ["SymlinkStrategy"]
