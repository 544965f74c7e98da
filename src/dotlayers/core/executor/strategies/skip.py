"""skip: do nothing, successfully."""
from __future__ import annotations

import logging
from typing import List

from dotlayers.core.contracts import ToolConfig
from dotlayers.core.executor.context import StrategyContext
from dotlayers.core.executor.strategies.base import MergeStrategy

logger = logging.getLogger(__name__)


class SkipStrategy(MergeStrategy):
    name = "skip"

    def merge(self, config: ToolConfig, context: StrategyContext) -> List[str]:
        logger.debug("Skipping %s", config.tool_name)
        return []


__all__ = ["SkipStrategy"]
