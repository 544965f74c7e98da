"""JSON Schema validation for structured definition files.

Schemas ship as YAML (JSON Schema expressed in YAML) under
``dotlayers/data/schemas`` and are validated with Draft 2020-12 so that
every violation is reported, not just the first.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator

from dotlayers.core.exceptions import ValidationError
from dotlayers.data import read_yaml

TOOL_DEFINITION = "tool-definition"
MACHINE_PROFILE = "machine-profile"
REPOSITORIES = "repositories"


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema; ``.yaml`` is appended when missing."""
    if not schema_name.endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"
    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def schema_errors(payload: Any, schema_name: str) -> List[str]:
    """Return ``path: message`` strings for every violation (empty if valid)."""
    validator = Draft202012Validator(load_schema(schema_name))
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(list(e.path))):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_document(
    payload: Any,
    schema_name: str,
    *,
    subject: str,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """Raise ``ValidationError`` listing every schema violation."""
    errors = schema_errors(payload, schema_name)
    if errors:
        raise ValidationError(subject, errors, context=context)


__all__ = [
    "MACHINE_PROFILE",
    "REPOSITORIES",
    "TOOL_DEFINITION",
    "load_schema",
    "schema_errors",
    "validate_document",
]
