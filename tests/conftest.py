import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'dotlayers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from dotlayers.core.backend import MemoryBackend
from dotlayers.core.logging_config import reset_logging_for_tests


DOTFILES_ROOT = "/home/user/.dotfiles"


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI commands install stream handlers; drop them so caplog keeps working."""
    yield
    reset_logging_for_tests()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Pin HOME and clear DOTFILES_DIR so path expansion is deterministic."""
    monkeypatch.setenv("HOME", "/home/user")
    monkeypatch.delenv("DOTFILES_DIR", raising=False)


@pytest.fixture
def memory_backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def dotfiles_root(memory_backend: MemoryBackend) -> str:
    """An empty dotfiles tree (``machines/`` and ``tools/``) on the memory backend."""
    memory_backend.set_dir(f"{DOTFILES_ROOT}/machines")
    memory_backend.set_dir(f"{DOTFILES_ROOT}/tools")
    return DOTFILES_ROOT
