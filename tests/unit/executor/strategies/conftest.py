from datetime import datetime

import pytest

from dotlayers.core.backend import MemoryBackend
from dotlayers.core.backup import BackupManager
from dotlayers.core.contracts import ToolConfig
from dotlayers.core.executor import StrategyContext

ROOT = "/dot"
BACKUP_DIR = f"{ROOT}/.backup"


@pytest.fixture
def context(memory_backend: MemoryBackend) -> StrategyContext:
    backup = BackupManager(memory_backend, BACKUP_DIR, clock=lambda: datetime(2024, 1, 2, 3, 4, 5))
    return StrategyContext(backend=memory_backend, backup=backup, dotfiles_dir=ROOT)


@pytest.fixture
def make_config():
    """Build a resolved ToolConfig from ``(name, resolved_path)`` pairs."""

    def _make(target: str, *layers, merge_hook: str = "builtin:concat") -> ToolConfig:
        config = ToolConfig(tool_name="tool", target=target, merge_hook=merge_hook)
        for name, resolved in layers:
            index = config.add_layer(name, "local", name)
            if resolved:
                config.set_layer_resolved(index, resolved)
        return config

    return _make
