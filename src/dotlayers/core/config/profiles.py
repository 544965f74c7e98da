"""Machine profile discovery and loading.

Profiles live in ``<dotfiles>/machines/`` as ``<name>.json``,
``<name>.yaml``/``.yml`` or legacy ``<name>.sh``. Structured profiles
look like::

    {"name": "laptop", "tools": {"git": ["base", "work"], "zsh": []}}
"""
from __future__ import annotations

import logging
import posixpath
from typing import List, Optional

from dotlayers.core.backend import Backend
from dotlayers.core.config.legacy import parse_legacy_profile
from dotlayers.core.contracts import MachineConfig
from dotlayers.core.exceptions import NotFoundError, ValidationError
from dotlayers.core.paths import path_expand
from dotlayers.core.schemas import MACHINE_PROFILE, validate_document
from dotlayers.core.utils.io import read_config_text, read_document

logger = logging.getLogger(__name__)

PROFILE_EXTENSIONS = (".json", ".yaml", ".yml", ".sh")


def profile_name_from_path(path: str) -> str:
    name = posixpath.basename(path)
    for ext in PROFILE_EXTENSIONS:
        if name.endswith(ext):
            return name[: -len(ext)]
    return name


def machines_dir(dotfiles_dir: str) -> str:
    return f"{dotfiles_dir.rstrip('/')}/machines"


def find_profile(backend: Backend, dotfiles_dir: str, profile: str) -> str:
    """Locate a profile by name or path.

    A value containing ``/`` (or starting with ``~``) is treated as a path;
    anything else is looked up under ``machines/``, trying each known
    extension when none is given.

    Raises:
        NotFoundError: If no matching profile file exists.
    """
    if not profile:
        raise NotFoundError("Machine profile name is required")

    if "/" in profile or profile.startswith("~"):
        candidates = [path_expand(profile)]
    else:
        base = f"{machines_dir(dotfiles_dir)}/{profile}"
        if profile.endswith(PROFILE_EXTENSIONS):
            candidates = [base]
        else:
            candidates = [base + ext for ext in PROFILE_EXTENSIONS]

    for candidate in candidates:
        if backend.is_file(candidate):
            return candidate
    raise NotFoundError(
        f"Machine profile not found: {profile}",
        context={"profile": profile, "searched": candidates},
    )


def load_machine_config(backend: Backend, path: str) -> MachineConfig:
    """Load and validate one profile file.

    Raises:
        NotFoundError: If the file is missing.
        ValidationError: If the document is malformed or invalid.
    """
    if not backend.is_file(path):
        raise NotFoundError(f"Machine profile not found: {path}")

    default_name = profile_name_from_path(path)

    if path.endswith(".sh"):
        tools, layers = parse_legacy_profile(read_config_text(backend, path))
        if not tools:
            raise ValidationError(
                "MachineConfig", [f"TOOLS array not found in {path}"], context={"path": path}
            )
        config = MachineConfig(profile_name=default_name)
        for tool in tools:
            config.add_tool(tool, layers.get(tool, []))
    else:
        data = read_document(backend, path)
        if data is None:
            data = {}
        validate_document(data, MACHINE_PROFILE, subject="MachineConfig", context={"path": path})
        config = MachineConfig(profile_name=str(data.get("name") or default_name))
        for tool, tool_layers in data["tools"].items():
            config.add_tool(str(tool), [str(layer) for layer in tool_layers])

    config.validate()
    logger.debug("Loaded profile %s with %d tool(s)", config.profile_name, config.tool_count)
    return config


def list_profiles(backend: Backend, dotfiles_dir: str) -> List[str]:
    """Sorted, de-duplicated profile names found under ``machines/``."""
    names = {
        profile_name_from_path(entry)
        for entry in backend.list_dir(machines_dir(dotfiles_dir))
        if entry.endswith(PROFILE_EXTENSIONS)
    }
    return sorted(names)


def describe_profile(backend: Backend, dotfiles_dir: str, profile: str) -> Optional[MachineConfig]:
    """Best-effort load used for listings; ``None`` when the profile is broken."""
    try:
        return load_machine_config(backend, find_profile(backend, dotfiles_dir, profile))
    except (NotFoundError, ValidationError) as e:
        logger.warning("Skipping profile %s: %s", profile, e)
        return None


__all__ = [
    "PROFILE_EXTENSIONS",
    "describe_profile",
    "find_profile",
    "list_profiles",
    "load_machine_config",
    "machines_dir",
    "profile_name_from_path",
]
