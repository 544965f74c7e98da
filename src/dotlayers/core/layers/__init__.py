"""Layer resolution."""
from __future__ import annotations

from dotlayers.core.layers.resolver import LayerResolver, split_spec

__all__ = ["LayerResolver", "split_spec"]
