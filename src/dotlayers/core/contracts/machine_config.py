"""Machine profile contract: which tools a machine gets, with which layers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from dotlayers.core.contracts._rules import is_identifier
from dotlayers.core.exceptions import ValidationError


@dataclass(slots=True)
class MachineConfig:
    """Named tool -> requested-layer assignment for one environment.

    Attributes:
        profile_name: Profile identifier (usually the profile file stem)
        tools: Tool names in processing order
        tool_layers: Requested layer names per tool, in priority order.
            A tool listed in ``tools`` with no entry here is invalid; an
            entry holding an empty list means "use every declared layer".
    """

    profile_name: str
    tools: List[str] = field(default_factory=list)
    tool_layers: Dict[str, List[str]] = field(default_factory=dict)

    def add_tool(self, name: str, layers: Iterable[str] | None = None) -> None:
        """Append a tool; ``layers=None`` leaves its layer entry unset."""
        if name not in self.tools:
            self.tools.append(name)
        if layers is not None:
            self.set_tool_layers(name, layers)

    def set_tool_layers(self, name: str, layers: Iterable[str] | str) -> None:
        if isinstance(layers, str):
            layers = layers.split()
        self.tool_layers[name] = [layer for layer in layers if layer]

    def get_tool_layers(self, name: str) -> List[str]:
        return list(self.tool_layers.get(name, []))

    def has_tool_layers(self, name: str) -> bool:
        return name in self.tool_layers

    @property
    def tool_count(self) -> int:
        return len(self.tools)

    def validation_errors(self) -> List[str]:
        errors: List[str] = []

        if not self.profile_name:
            errors.append("profile_name is required")
        elif not is_identifier(self.profile_name):
            errors.append(f"profile_name must match [a-zA-Z0-9_-]+: {self.profile_name}")

        for tool in self.tools:
            if not tool:
                errors.append("tool name must not be empty")
                continue
            if not is_identifier(tool):
                errors.append(f"tool name must match [a-zA-Z0-9_-]+: {tool}")
            if tool not in self.tool_layers:
                errors.append(f"no layers defined for tool: {tool}")

        return errors

    def validate(self) -> None:
        errors = self.validation_errors()
        if errors:
            raise ValidationError(
                "MachineConfig", errors, context={"profile": self.profile_name}
            )


__all__ = ["MachineConfig"]
