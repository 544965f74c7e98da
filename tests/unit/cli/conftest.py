from __future__ import annotations

from typing import Callable, List

import pytest

from dotlayers.cli._dispatcher import build_parser
from dotlayers.core.backend import MemoryBackend


@pytest.fixture
def run_cli(memory_backend: MemoryBackend) -> Callable[[List[str]], int]:
    """Parse ``argv`` with the real parser and run the command on the memory backend."""

    def _run(argv: List[str]) -> int:
        args = build_parser().parse_args(argv)
        args.backend = memory_backend
        return args._func(args)

    return _run
