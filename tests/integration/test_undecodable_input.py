"""Non UTF-8 bytes on disk fail only the tool that reads them."""
from __future__ import annotations

from pathlib import Path

import pytest

from helpers import write_json

from dotlayers.core.backend import LocalBackend
from dotlayers.core.orchestrator import Orchestrator

pytestmark = pytest.mark.integration

BINARY = b"\xff\xfe\x80"


@pytest.fixture
def tree(tmp_path: Path) -> dict:
    root = tmp_path / "dotfiles"
    home = tmp_path / "home"
    home.mkdir()
    for name in ("bin", "good"):
        write_json(
            root / "tools" / name / "tool.json",
            {
                "target": str(home / f".{name}rc"),
                "merge_hook": "builtin:concat",
                "layers": [{"name": "base", "source": "local", "path": f"configs/{name}"}],
            },
        )
    (root / "configs" / "bin").mkdir(parents=True)
    (root / "configs" / "bin" / "settings").write_text("bin settings", encoding="utf-8")
    (root / "configs" / "good").mkdir(parents=True)
    (root / "configs" / "good" / ".goodrc").write_text("good settings", encoding="utf-8")
    write_json(root / "machines" / "m.json", {"tools": {"bin": [], "good": []}})
    return {"root": root, "home": home}


def _run(root: Path):
    orch = Orchestrator(LocalBackend())
    orch.init(str(root))
    return orch.run("m")


def test_binary_file_in_layer_fails_only_that_tool(tree: dict) -> None:
    # Sorts ahead of ``settings`` so the first-file fallback picks it.
    (tree["root"] / "configs" / "bin" / ".DS_Store").write_bytes(BINARY)

    result = _run(tree["root"])

    assert result.failed_tools == ["bin"]
    assert result.succeeded == 1
    assert "not UTF-8" in result.outcomes[0].message
    assert not (tree["home"] / ".binrc").exists()
    assert "good settings" in (tree["home"] / ".goodrc").read_text(encoding="utf-8")


def test_undecodable_tool_definition_fails_only_that_tool(tree: dict) -> None:
    (tree["root"] / "tools" / "bin" / "tool.json").write_bytes(b'{"target": "\xff\xfe"}')

    result = _run(tree["root"])

    assert result.failed_tools == ["bin"]
    assert result.succeeded == 1
    assert "not valid UTF-8" in result.outcomes[0].message
    assert (tree["home"] / ".goodrc").exists()
