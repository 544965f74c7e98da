"""Profile orchestration.

The orchestrator walks a machine profile's tools in order and runs each
through the same pipeline:

1. locate the tool definition (absent -> skipped)
2. parse it (structured preferred over legacy)
3. build and validate the ToolConfig
4. keep only the layers the profile asked for, in the profile's order
5. make sure referenced external repositories are cloned
6. resolve every layer (first failure fails the tool)
7. check resolved layers exist (warning only)
8. stop here in dry-run mode
9. run the merge hook (failure fails the tool)
10. run the install hook (failure is only a warning)

A failing tool never stops the run; the outcome of every tool is
collected into a :class:`RunResult`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from dotlayers.core.backend import Backend, LocalBackend
from dotlayers.core.backup import BackupManager
from dotlayers.core.config import (
    build_tool_config,
    find_profile,
    load_machine_config,
    parse_tool_definition,
)
from dotlayers.core.contracts import MachineConfig, ToolConfig
from dotlayers.core.exceptions import (
    DotlayersError,
    InvalidInputError,
    NotFoundError,
    ValidationError,
)
from dotlayers.core.executor import HookRunner, StrategyRegistry
from dotlayers.core.layers import LayerResolver
from dotlayers.core.paths import path_expand, path_normalize
from dotlayers.core.repos import RepoRegistry

logger = logging.getLogger(__name__)

BACKUP_DIRNAME = ".backup"


class ToolStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(slots=True)
class ToolOutcome:
    """What happened to one tool during a run."""

    name: str
    status: ToolStatus
    message: str = ""
    files_modified: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "files_modified": list(self.files_modified),
        }


@dataclass(slots=True)
class RunResult:
    """Aggregate tally of a run.

    Attributes:
        profile: Profile name (empty for single-tool runs)
        dry_run: Whether the run stopped before mutating anything
        outcomes: Per-tool outcomes in processing order
    """

    profile: str = ""
    dry_run: bool = False
    outcomes: List[ToolOutcome] = field(default_factory=list)

    def _count(self, status: ToolStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def tools_processed(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return self._count(ToolStatus.SUCCEEDED)

    @property
    def failed(self) -> int:
        return self._count(ToolStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(ToolStatus.SKIPPED)

    @property
    def failed_tools(self) -> List[str]:
        return [o.name for o in self.outcomes if o.status is ToolStatus.FAILED]

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile,
            "dry_run": self.dry_run,
            "tools_processed": self.tools_processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "failed_tools": self.failed_tools,
            "success": self.success,
            "tools": [outcome.to_dict() for outcome in self.outcomes],
        }


class Orchestrator:
    """Runs machine profiles (or single tools) through the layering pipeline."""

    def __init__(
        self,
        backend: Optional[Backend] = None,
        *,
        registry: Optional[StrategyRegistry] = None,
    ) -> None:
        self.backend = backend if backend is not None else LocalBackend()
        self._registry = registry
        self.reset()

    # -- lifecycle --------------------------------------------------------

    def init(self, dotfiles_dir: str, *, dry_run: bool = False, verbose: bool = False) -> None:
        """Accept the dotfiles root and wire resolvers.

        Raises:
            InvalidInputError: If ``dotfiles_dir`` is empty.
            ValidationError: If the repository registry file is malformed.
        """
        if not dotfiles_dir:
            raise InvalidInputError("dotfiles_dir is required")

        root = path_normalize(path_expand(dotfiles_dir))
        self.dotfiles_dir = root
        self.dry_run = dry_run
        self.verbose = verbose
        self.repos = RepoRegistry.load(self.backend, root)
        self.resolver = LayerResolver(self.backend, root, self.repos)
        self.backup = BackupManager(self.backend, f"{root}/{BACKUP_DIRNAME}")
        self._initialized = True
        logger.debug("Orchestrator initialized at %s (dry_run=%s)", root, dry_run)

    def reset(self) -> None:
        """Return to the uninitialized state."""
        self.dotfiles_dir = ""
        self.dry_run = False
        self.verbose = False
        self.repos: Optional[RepoRegistry] = None
        self.resolver: Optional[LayerResolver] = None
        self.backup: Optional[BackupManager] = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise InvalidInputError("Orchestrator not initialized")

    # -- entry points -----------------------------------------------------

    def load_profile(self, profile: str) -> MachineConfig:
        self._require_initialized()
        path = find_profile(self.backend, self.dotfiles_dir, profile)
        return load_machine_config(self.backend, path)

    def run(self, profile: str) -> RunResult:
        """Process every tool of ``profile``.

        Raises:
            InvalidInputError: If not initialized.
            NotFoundError: If the profile does not exist.
            ValidationError: If the profile is invalid.
        """
        machine = self.load_profile(profile)
        result = RunResult(profile=machine.profile_name, dry_run=self.dry_run)
        runner = self._runner(machine.profile_name)

        logger.info("Profile: %s (%d tools)", machine.profile_name, machine.tool_count)
        for tool in machine.tools:
            outcome = self._process_tool(tool, machine.get_tool_layers(tool), runner)
            result.outcomes.append(outcome)

        self._log_summary(result)
        return result

    def run_tool(
        self,
        tool_name: str,
        *,
        machine: str = "",
        layers: Optional[List[str]] = None,
    ) -> RunResult:
        """Process a single tool.

        ``layers`` narrows the tool to that subset, in that order; empty or
        ``None`` keeps every declared layer.
        """
        self._require_initialized()
        if not tool_name:
            raise InvalidInputError("tool name is required")
        result = RunResult(profile=machine, dry_run=self.dry_run)
        result.outcomes.append(
            self._process_tool(tool_name, list(layers or []), self._runner(machine))
        )
        self._log_summary(result)
        return result

    # -- pipeline ---------------------------------------------------------

    def _runner(self, machine: str) -> HookRunner:
        assert self.backup is not None
        return HookRunner(
            self.backend,
            self.dotfiles_dir,
            self.backup,
            registry=self._registry,
            machine=machine,
        )

    def tool_dir(self, tool_name: str) -> str:
        return f"{self.dotfiles_dir}/tools/{tool_name}"

    def _process_tool(
        self, tool_name: str, requested_layers: List[str], runner: HookRunner
    ) -> ToolOutcome:
        logger.info("Processing: %s", tool_name)
        try:
            return self._pipeline(tool_name, requested_layers, runner)
        except DotlayersError as e:
            logger.error("%s failed: %s", tool_name, e)
            return ToolOutcome(tool_name, ToolStatus.FAILED, str(e))
        except OSError as e:
            logger.error("%s failed: %s", tool_name, e)
            return ToolOutcome(tool_name, ToolStatus.FAILED, str(e))
        except Exception as e:
            # Custom strategy handlers may raise anything; the run goes on.
            logger.exception("%s failed unexpectedly", tool_name)
            return ToolOutcome(tool_name, ToolStatus.FAILED, f"{type(e).__name__}: {e}")

    def _pipeline(
        self, tool_name: str, requested_layers: List[str], runner: HookRunner
    ) -> ToolOutcome:
        assert self.resolver is not None and self.repos is not None
        tool_dir = self.tool_dir(tool_name)

        try:
            raw = parse_tool_definition(self.backend, tool_dir)
        except NotFoundError:
            logger.warning("No tool definition found for %s, skipping", tool_name)
            return ToolOutcome(tool_name, ToolStatus.SKIPPED, "no tool definition")

        config = build_tool_config(raw, tool_dir)

        if requested_layers:
            config = self._filter_layers(config, requested_layers)

        if not self.dry_run:
            self._ensure_repos(config)

        self.resolver.resolve_tool_config(config)
        if self.verbose:
            for layer in config.layers:
                logger.info("  %s -> %s", layer.name, layer.resolved_path)

        try:
            self.resolver.validate_resolved(config)
        except ValidationError as e:
            logger.warning("Some layers missing for %s, continuing anyway\n%s", tool_name, e)

        if self.dry_run:
            self._report_dry_run(config)
            return ToolOutcome(tool_name, ToolStatus.SUCCEEDED, "dry run")

        merge = runner.run_merge(config)
        if not merge.success:
            message = merge.error_message or "merge hook failed"
            logger.error("Merge hook failed for %s: %s", tool_name, message)
            return ToolOutcome(tool_name, ToolStatus.FAILED, f"merge failed: {message}")

        files = list(merge.files_modified)
        if config.has_install_hook:
            install = runner.run_install(config)
            if install.success:
                files.extend(f for f in install.files_modified if f not in files)
            else:
                logger.warning(
                    "Install hook failed for %s: %s", tool_name, install.error_message
                )

        logger.info("Installed %s", tool_name)
        return ToolOutcome(tool_name, ToolStatus.SUCCEEDED, files_modified=files)

    def _filter_layers(self, config: ToolConfig, requested: List[str]) -> ToolConfig:
        selected, missing = config.select_layers(requested)
        for name in missing:
            logger.warning(
                "Layer '%s' requested for %s is not declared, ignoring", name, config.tool_name
            )
        return selected

    def _ensure_repos(self, config: ToolConfig) -> None:
        assert self.resolver is not None and self.repos is not None
        configured = [
            name
            for name in self.resolver.external_sources(config)
            if self.repos.is_configured(name)
        ]
        if configured:
            self.repos.ensure_many(configured)

    def _report_dry_run(self, config: ToolConfig) -> None:
        logger.info("  Tool: %s", config.tool_name)
        logger.info("  Target: %s", config.target)
        logger.info("  Merge hook: %s", config.merge_hook)
        if config.install_hook:
            logger.info("  Install hook: %s", config.install_hook)
        logger.info("  Layers (%d):", config.layer_count)
        for layer in config.layers:
            logger.info("    - %s: %s", layer.name, layer.resolved_path)
        logger.info("[DRY-RUN] %s", config.tool_name)

    def _log_summary(self, result: RunResult) -> None:
        logger.info(
            "Summary: %d processed, %d succeeded, %d failed, %d skipped",
            result.tools_processed,
            result.succeeded,
            result.failed,
            result.skipped,
        )
        if result.failed_tools:
            logger.error("Failed tools: %s", ", ".join(result.failed_tools))


__all__ = ["BACKUP_DIRNAME", "Orchestrator", "RunResult", "ToolOutcome", "ToolStatus"]
