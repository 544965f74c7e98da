"""Merge/install hook execution.

A hook is either ``builtin:<name>`` (dispatched through the strategy
registry) or a script path run with ``bash`` under the hook environment
contract. Both report through a ``HookResult``.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, Mapping, Optional

from dotlayers.core.backend import Backend
from dotlayers.core.backup import BackupManager
from dotlayers.core.contracts import HookResult, ToolConfig
from dotlayers.core.contracts._rules import builtin_name, is_builtin_hook
from dotlayers.core.exceptions import DotlayersError, ErrorCode, code_of
from dotlayers.core.executor.context import StrategyContext
from dotlayers.core.executor.env import build_hook_env
from dotlayers.core.executor.registry import StrategyRegistry, default_registry
from dotlayers.core.paths import path_expand

logger = logging.getLogger(__name__)


class HookRunner:
    """Runs a tool's merge and install hooks."""

    def __init__(
        self,
        backend: Backend,
        dotfiles_dir: str,
        backup: BackupManager,
        *,
        registry: Optional[StrategyRegistry] = None,
        machine: str = "",
        base_env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.backend = backend
        self.dotfiles_dir = dotfiles_dir
        self.backup = backup
        self.registry = registry if registry is not None else default_registry()
        self.machine = machine
        self._base_env = base_env

    def context(self) -> StrategyContext:
        return StrategyContext(
            backend=self.backend,
            backup=self.backup,
            dotfiles_dir=self.dotfiles_dir,
            machine=self.machine,
        )

    def build_env(self, config: ToolConfig) -> Dict[str, str]:
        return build_hook_env(config, dotfiles_dir=self.dotfiles_dir, machine=self.machine)

    def run_merge(self, config: ToolConfig) -> HookResult:
        if not config.merge_hook:
            return HookResult.failure(ErrorCode.INVALID_INPUT, "No merge hook defined")
        return self.run_hook(config.merge_hook, config)

    def run_install(self, config: ToolConfig) -> HookResult:
        if not config.install_hook:
            return HookResult.ok()
        return self.run_hook(config.install_hook, config)

    def run_hook(self, hook: str, config: ToolConfig) -> HookResult:
        if is_builtin_hook(hook):
            return self._run_builtin(builtin_name(hook), config)
        return self._run_script(hook, config)

    def _run_builtin(self, name: str, config: ToolConfig) -> HookResult:
        try:
            handler = self.registry.get(name)
        except DotlayersError as e:
            return HookResult.failure(e.code, str(e))
        logger.debug("Running builtin:%s for %s", name, config.tool_name)
        return handler(config, self.context())

    def _script_path(self, hook: str, config: ToolConfig) -> str:
        script = path_expand(hook)
        if script.startswith("/"):
            return script
        return f"{self.dotfiles_dir.rstrip('/')}/tools/{config.tool_name}/{script}"

    def _run_script(self, hook: str, config: ToolConfig) -> HookResult:
        script = self._script_path(hook, config)
        if not self.backend.is_file(script):
            return HookResult.failure(ErrorCode.NOT_FOUND, f"Hook script not found: {script}")

        env = dict(os.environ if self._base_env is None else self._base_env)
        env.update(self.build_env(config))

        logger.info("Running hook script %s", script)
        try:
            self.backend.make_executable(script)
            completed = self.backend.run(["bash", script], env=env)
        except (DotlayersError, OSError) as e:
            return HookResult.failure(code_of(e), str(e))

        if completed.stdout:
            logger.debug("%s", completed.stdout.rstrip())
        if not completed.ok:
            if completed.stderr:
                logger.error("%s", completed.stderr.rstrip())
            return HookResult.failure(
                completed.returncode,
                f"Script failed with exit code {completed.returncode}",
            )

        result = HookResult.ok()
        if config.target:
            result.add_file(path_expand(config.target))
        return result


__all__ = ["HookRunner"]
