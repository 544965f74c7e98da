"""json-merge: deep-merge every layer's JSON document, later layers win."""
from __future__ import annotations

import json
import logging
import posixpath
from typing import Any, Dict, List

from dotlayers.core.contracts import ToolConfig
from dotlayers.core.exceptions import NotFoundError
from dotlayers.core.executor.context import StrategyContext
from dotlayers.core.executor.strategies.base import MergeStrategy
from dotlayers.core.executor.strategies.discovery import find_json_file
from dotlayers.core.utils.io import dump_json
from dotlayers.core.utils.merge import deep_merge

logger = logging.getLogger(__name__)


class JsonMergeStrategy(MergeStrategy):
    name = "json-merge"

    def merge(self, config: ToolConfig, context: StrategyContext) -> List[str]:
        self.require_layers(config)
        backend = context.backend
        target = self.target_path(config)
        target_name = posixpath.basename(target)

        merged: Dict[str, Any] = {}
        contributed = 0
        for layer in config.layers:
            if not layer.resolved_path:
                logger.warning("Layer %s: not resolved", layer.name)
                continue
            found = find_json_file(backend, layer.resolved_path, target_name)
            if found is None:
                logger.warning("No JSON file in layer: %s", layer.resolved_path)
                continue
            try:
                document = json.loads(backend.read_text(found))
            except json.JSONDecodeError as e:
                logger.warning("Invalid JSON in layer %s (%s): %s", layer.name, found, e)
                continue
            if not isinstance(document, dict):
                logger.warning("Layer %s: %s is not a JSON object, skipping", layer.name, found)
                continue
            merged = deep_merge(merged, document)
            contributed += 1
            logger.debug("Merged: %s", layer.name)

        if contributed == 0:
            raise NotFoundError("No JSON files found in any layer")

        self.prepare_target(context, target)
        backend.write_text(target, dump_json(merged))
        logger.info("Merged JSON written: %s", target)
        return [target]


__all__ = ["JsonMergeStrategy"]
