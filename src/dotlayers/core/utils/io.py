"""Structured document reading through a backend."""
from __future__ import annotations

import json
from typing import Any

import yaml

from dotlayers.core.backend import Backend
from dotlayers.core.exceptions import ValidationError

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def parse_document(text: str, path: str) -> Any:
    """Parse JSON or YAML text, picking the parser from ``path``'s suffix.

    Raises:
        ValidationError: If the text is not well-formed.
    """
    try:
        if path.endswith(YAML_SUFFIXES):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(
            "Document", [f"{path}: invalid syntax: {e}"], context={"path": path}
        ) from e


def read_config_text(backend: Backend, path: str) -> str:
    """Read a definition file as UTF-8 text.

    Raises:
        ValidationError: If the bytes are not valid UTF-8.
    """
    try:
        return backend.read_text(path)
    except UnicodeDecodeError as e:
        raise ValidationError(
            "Document", [f"{path}: not valid UTF-8 text: {e}"], context={"path": path}
        ) from e


def read_document(backend: Backend, path: str) -> Any:
    """Read and parse a JSON/YAML file through ``backend``."""
    return parse_document(read_config_text(backend, path), path)


def dump_json(data: Any) -> str:
    """Pretty-printed JSON with a trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


__all__ = [
    "JSON_SUFFIXES",
    "YAML_SUFFIXES",
    "dump_json",
    "parse_document",
    "read_config_text",
    "read_document",
]
