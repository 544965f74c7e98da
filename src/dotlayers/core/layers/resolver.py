"""Layer resolution: ``source:path`` specs to absolute directories."""
from __future__ import annotations

import logging
from typing import List, Optional

from dotlayers.core.backend import Backend
from dotlayers.core.contracts import ToolConfig
from dotlayers.core.contracts._rules import LOCAL_SOURCE
from dotlayers.core.exceptions import InvalidInputError, NotFoundError, ValidationError
from dotlayers.core.paths import path_expand, path_normalize, path_resolve_relative
from dotlayers.core.repos import RepoRegistry

logger = logging.getLogger(__name__)


def split_spec(spec: str) -> tuple[str, str]:
    """Split ``source:path`` on the first colon; both halves must be non-empty."""
    source, sep, path = (spec or "").partition(":")
    if not sep or not source or not path:
        raise InvalidInputError(
            f"invalid layer spec: {spec} (expected source:path)", context={"spec": spec}
        )
    return source, path


class LayerResolver:
    """Resolves layer specs against the dotfiles root and external repos."""

    def __init__(
        self,
        backend: Backend,
        dotfiles_dir: str,
        repos: Optional[RepoRegistry] = None,
    ) -> None:
        if not dotfiles_dir:
            raise InvalidInputError("dotfiles directory is required")
        self.backend = backend
        self.dotfiles_dir = path_normalize(path_expand(dotfiles_dir))
        self.repos = repos if repos is not None else RepoRegistry.load(backend, self.dotfiles_dir)

    def resolve_spec(self, spec: str) -> str:
        """Return the absolute, normalized directory a spec designates.

        Raises:
            InvalidInputError: If the spec is malformed.
            NotFoundError: If the spec names an unknown repository.
        """
        source, rel = split_spec(spec)
        if source == LOCAL_SOURCE:
            root = self.dotfiles_dir
        else:
            root = self.repos.get_path(source)
        return path_resolve_relative(root, rel)

    def resolve_tool_config(self, config: ToolConfig) -> None:
        """Fill in every layer's resolved path, in order; stop at the first failure."""
        for index, layer in enumerate(config.layers):
            try:
                resolved = self.resolve_spec(layer.spec)
            except (InvalidInputError, NotFoundError) as e:
                logger.error("Failed to resolve layer '%s': %s", layer.name, layer.spec)
                raise type(e)(
                    f"Failed to resolve layer '{layer.name}': {layer.spec} ({e})",
                    context={"tool": config.tool_name, "layer": layer.name, "spec": layer.spec},
                ) from e
            config.set_layer_resolved(index, resolved)
            logger.debug("Resolved %s -> %s", layer.name, resolved)

    def missing_layers(self, config: ToolConfig) -> List[str]:
        missing: List[str] = []
        for layer in config.layers:
            if not layer.resolved_path:
                missing.append(f"{layer.name} (not resolved)")
            elif not self.backend.is_dir(layer.resolved_path):
                missing.append(f"{layer.name} ({layer.resolved_path})")
        return missing

    def validate_resolved(self, config: ToolConfig) -> None:
        """Check every resolved layer is an existing directory.

        Raises:
            ValidationError: Listing all missing layers at once.
        """
        missing = self.missing_layers(config)
        if missing:
            raise ValidationError(
                "Layers",
                missing,
                title="Missing layer directories:",
                context={"tool": config.tool_name},
            )

    def external_sources(self, config: ToolConfig) -> List[str]:
        """Repository names referenced by a tool's layers, first-seen order."""
        seen: List[str] = []
        for layer in config.layers:
            if layer.source != LOCAL_SOURCE and layer.source not in seen:
                seen.append(layer.source)
        return seen


__all__ = ["LayerResolver", "split_spec"]
