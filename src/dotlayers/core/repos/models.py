"""External repository data models."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Repository:
    """An external git-backed layer source.

    Attributes:
        name: Uppercase identifier used as a layer ``source``
        url: Git clone URL
        path: Local checkout path (already tilde/env expanded)
    """

    name: str
    url: str
    path: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Repository:
        return cls(name=data["name"], url=data["url"], path=data["path"])

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "url": self.url, "path": self.path}


__all__ = ["Repository"]
