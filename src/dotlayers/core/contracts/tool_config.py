"""Tool configuration contract.

A ``ToolConfig`` describes how one tool's target file is composed: the
target path, the merge hook (``builtin:<name>`` or a script), an optional
install hook, custom hook environment variables and an ordered list of
``LayerSpec`` records. Layer order is priority order: later layers win.

The record is built fresh for every tool on every run. After construction
it only changes by appending layers, setting a layer's resolved path, or
setting the optional install hook.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from dotlayers.core.contracts._rules import (
    LOCAL_SOURCE,
    hook_errors,
    is_identifier,
    is_layer_source,
)
from dotlayers.core.exceptions import InvalidInputError, ValidationError


@dataclass(slots=True)
class LayerSpec:
    """One named contributor to a tool's configuration.

    Attributes:
        name: Layer identifier (e.g. ``base``, ``work``)
        source: ``local`` or an uppercase repository name
        path: Path relative to the source root
        resolved_path: Absolute path, empty until the resolver runs
    """

    name: str
    source: str
    path: str
    resolved_path: str = ""

    @property
    def spec(self) -> str:
        """The ``source:path`` form used in definitions and diagnostics."""
        return f"{self.source}:{self.path}"

    @property
    def is_local(self) -> bool:
        return self.source == LOCAL_SOURCE

    @property
    def is_resolved(self) -> bool:
        return bool(self.resolved_path)

    def validation_errors(self) -> List[str]:
        errors: List[str] = []
        if not self.name:
            errors.append("name is required")
        elif not is_identifier(self.name):
            errors.append(f"name must match [a-zA-Z0-9_-]+: {self.name}")
        if not self.source:
            errors.append("source is required")
        elif not is_layer_source(self.source):
            errors.append(f"source must be 'local' or REPO_NAME: {self.source}")
        if not self.path:
            errors.append("path is required")
        elif self.path.startswith("/"):
            errors.append(f"path must be relative (not start with /): {self.path}")
        return errors

    def validate(self) -> None:
        errors = self.validation_errors()
        if errors:
            raise ValidationError("LayerSpec", errors, context={"layer": self.name})


@dataclass(slots=True)
class ToolConfig:
    """Validated description of how to build one tool's target."""

    tool_name: str
    target: str
    merge_hook: str
    install_hook: str = ""
    env: Dict[str, str] = field(default_factory=dict)
    layers: List[LayerSpec] = field(default_factory=list)

    # -- mutators ---------------------------------------------------------

    def add_layer(self, name: str, source: str, path: str) -> int:
        """Append a layer and return its index."""
        self.layers.append(LayerSpec(name=name, source=source, path=path))
        return len(self.layers) - 1

    def set_layer_resolved(self, index: int, resolved_path: str) -> None:
        self.layer(index).resolved_path = resolved_path

    def set_install_hook(self, hook: str) -> None:
        self.install_hook = hook

    # -- getters ----------------------------------------------------------

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    def layer(self, index: int) -> LayerSpec:
        if index < 0 or index >= len(self.layers):
            raise InvalidInputError(
                f"Layer index out of range: {index}",
                context={"tool": self.tool_name, "layer_count": len(self.layers)},
            )
        return self.layers[index]

    def layer_names(self) -> List[str]:
        return [layer.name for layer in self.layers]

    def resolved_paths(self) -> List[str]:
        return [layer.resolved_path for layer in self.layers]

    def find_layer(self, name: str) -> Optional[LayerSpec]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    @property
    def has_install_hook(self) -> bool:
        return bool(self.install_hook)

    # -- validation -------------------------------------------------------

    def validation_errors(self) -> List[str]:
        """Return every violated rule (empty when the record is valid)."""
        errors: List[str] = []

        if not self.tool_name:
            errors.append("tool_name is required")
        elif not is_identifier(self.tool_name):
            errors.append(f"tool_name must match [a-zA-Z0-9_-]+: {self.tool_name}")

        if not self.target:
            errors.append("target is required")
        elif not self.target.startswith(("/", "~")):
            errors.append(f"target must be absolute path (start with / or ~): {self.target}")

        if not self.merge_hook:
            errors.append("merge_hook is required")
        else:
            errors.extend(hook_errors("merge_hook", self.merge_hook))

        if self.install_hook:
            errors.extend(hook_errors("install_hook", self.install_hook))

        for index, layer in enumerate(self.layers):
            errors.extend(f"layer {index}: {err}" for err in layer.validation_errors())

        return errors

    def validate(self) -> None:
        """Raise ``ValidationError`` listing every violated rule."""
        errors = self.validation_errors()
        if errors:
            raise ValidationError("ToolConfig", errors, context={"tool": self.tool_name})

    # -- derived copies ---------------------------------------------------

    def select_layers(self, requested: Iterable[str]) -> Tuple["ToolConfig", List[str]]:
        """Return a copy holding only ``requested`` layers, in requested order.

        Unknown names are reported back instead of raising; the caller
        decides whether that deserves a warning.
        """
        selected = ToolConfig(
            tool_name=self.tool_name,
            target=self.target,
            merge_hook=self.merge_hook,
            install_hook=self.install_hook,
            env=dict(self.env),
        )
        missing: List[str] = []
        seen = set()
        for name in requested:
            if name in seen:
                continue
            seen.add(name)
            layer = self.find_layer(name)
            if layer is None:
                missing.append(name)
                continue
            index = selected.add_layer(layer.name, layer.source, layer.path)
            if layer.resolved_path:
                selected.set_layer_resolved(index, layer.resolved_path)
        return selected, missing


__all__ = ["LayerSpec", "ToolConfig"]
