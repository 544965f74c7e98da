"""Orchestrator pipeline over the in-memory backend."""
from __future__ import annotations

import json

import pytest

from helpers import add_layer_file, add_profile, add_repos, add_tool

from dotlayers.core.backend import MemoryBackend
from dotlayers.core.contracts import HookResult
from dotlayers.core.exceptions import InvalidInputError, NotFoundError, ValidationError
from dotlayers.core.executor import StrategyRegistry, default_registry
from dotlayers.core.orchestrator import Orchestrator, RunResult, ToolOutcome, ToolStatus

GITCONFIG = "/home/user/.gitconfig"


@pytest.fixture
def orchestrator(memory_backend: MemoryBackend, dotfiles_root: str) -> Orchestrator:
    orch = Orchestrator(memory_backend)
    orch.init(dotfiles_root)
    return orch


def seed_git(backend: MemoryBackend, root: str) -> None:
    add_tool(
        backend,
        root,
        "git",
        target="~/.gitconfig",
        merge_hook="builtin:concat",
        layers=[("base", "local", "configs/git/base"), ("work", "local", "configs/git/work")],
    )
    add_layer_file(backend, root, "configs/git/base", ".gitconfig", "BASE")
    add_layer_file(backend, root, "configs/git/work", ".gitconfig", "WORK")


class TestLifecycle:
    def test_init_required(self, memory_backend: MemoryBackend) -> None:
        orch = Orchestrator(memory_backend)
        assert not orch.is_initialized
        with pytest.raises(InvalidInputError, match="Orchestrator not initialized"):
            orch.run("laptop")
        with pytest.raises(InvalidInputError):
            orch.run_tool("git")

    def test_init_rejects_empty_root(self, memory_backend: MemoryBackend) -> None:
        with pytest.raises(InvalidInputError):
            Orchestrator(memory_backend).init("")

    def test_init_expands_root_and_wires_backup(self, memory_backend: MemoryBackend) -> None:
        orch = Orchestrator(memory_backend)
        orch.init("~/.dotfiles/", dry_run=True, verbose=True)
        assert orch.dotfiles_dir == "/home/user/.dotfiles"
        assert orch.backup.backup_dir == "/home/user/.dotfiles/.backup"
        assert orch.dry_run and orch.verbose

    def test_reset(self, orchestrator: Orchestrator) -> None:
        orchestrator.reset()
        assert not orchestrator.is_initialized
        assert orchestrator.dotfiles_dir == ""

    def test_malformed_repo_registry_fails_init(
        self, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        memory_backend.set_file(f"{dotfiles_root}/repos.json", "{oops")
        with pytest.raises(ValidationError):
            Orchestrator(memory_backend).init(dotfiles_root)

    def test_missing_profile(self, orchestrator: Orchestrator) -> None:
        with pytest.raises(NotFoundError):
            orchestrator.run("ghost")


class TestRun:
    def test_single_tool_success(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        seed_git(memory_backend, dotfiles_root)
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})

        result = orchestrator.run("laptop")

        assert result.success
        assert (result.tools_processed, result.succeeded, result.failed) == (1, 1, 0)
        content = memory_backend.read_text(GITCONFIG)
        assert content.index("BASE") < content.index("WORK")
        assert result.outcomes[0].files_modified == [GITCONFIG]

    def test_layer_subset_in_requested_order(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        seed_git(memory_backend, dotfiles_root)
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": ["base"]})

        orchestrator.run("laptop")

        content = memory_backend.read_text(GITCONFIG)
        assert "BASE" in content
        assert "WORK" not in content

    def test_requested_order_beats_declaration_order(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        seed_git(memory_backend, dotfiles_root)
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": ["work", "base"]})

        orchestrator.run("laptop")

        content = memory_backend.read_text(GITCONFIG)
        assert content.index("WORK") < content.index("BASE")

    def test_unknown_requested_layer_warns(
        self,
        orchestrator: Orchestrator,
        memory_backend: MemoryBackend,
        dotfiles_root: str,
        caplog,
    ) -> None:
        seed_git(memory_backend, dotfiles_root)
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": ["base", "ghost"]})

        result = orchestrator.run("laptop")

        assert result.success
        assert "Layer 'ghost' requested for git is not declared" in caplog.text

    def test_partial_failure_isolation(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        seed_git(memory_backend, dotfiles_root)
        # broken: relative target fails validation
        add_tool(
            memory_backend,
            dotfiles_root,
            "broken",
            target="relative/path",
            merge_hook="builtin:concat",
            layers=[("base", "local", "configs/broken")],
        )
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": [], "broken": []})

        result = orchestrator.run("laptop")

        assert result.tools_processed == 2
        assert result.succeeded == 1
        assert result.failed == 1
        assert result.failed_tools == ["broken"]
        assert result.success is False
        assert memory_backend.exists(GITCONFIG)

    def test_failure_does_not_stop_later_tools(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        memory_backend.set_file(f"{dotfiles_root}/tools/broken/tool.json", "{not json")
        seed_git(memory_backend, dotfiles_root)
        add_profile(memory_backend, dotfiles_root, "laptop", {"broken": [], "git": []})

        result = orchestrator.run("laptop")

        assert [o.status for o in result.outcomes] == [ToolStatus.FAILED, ToolStatus.SUCCEEDED]

    def test_missing_definition_is_skipped(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        add_profile(memory_backend, dotfiles_root, "laptop", {"tmux": []})

        result = orchestrator.run("laptop")

        assert result.skipped == 1
        assert result.failed == 0
        assert result.success
        assert result.outcomes[0].message == "no tool definition"

    def test_unresolvable_repo_fails_tool(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        add_tool(
            memory_backend,
            dotfiles_root,
            "git",
            target="~/.gitconfig",
            merge_hook="builtin:concat",
            layers=[("work", "UNKNOWN_REPO", "git")],
        )
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})

        result = orchestrator.run("laptop")

        assert result.failed_tools == ["git"]
        assert "UNKNOWN_REPO:git" in result.outcomes[0].message

    def test_missing_layer_dir_only_warns(
        self,
        orchestrator: Orchestrator,
        memory_backend: MemoryBackend,
        dotfiles_root: str,
        caplog,
    ) -> None:
        seed_git(memory_backend, dotfiles_root)
        add_tool(
            memory_backend,
            dotfiles_root,
            "git",
            target="~/.gitconfig",
            merge_hook="builtin:concat",
            layers=[("base", "local", "configs/git/base"), ("extra", "local", "configs/none")],
        )
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})

        result = orchestrator.run("laptop")

        assert result.success
        assert "Some layers missing for git" in caplog.text

    def test_merge_failure_fails_tool(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        add_tool(
            memory_backend,
            dotfiles_root,
            "git",
            target="~/.gitconfig",
            merge_hook="builtin:concat",
            layers=[("base", "local", "configs/empty")],
        )
        memory_backend.set_dir(f"{dotfiles_root}/configs/empty")
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})

        result = orchestrator.run("laptop")

        assert result.failed == 1
        assert result.outcomes[0].message.startswith("merge failed:")

    def test_install_failure_is_only_a_warning(
        self,
        memory_backend: MemoryBackend,
        dotfiles_root: str,
        caplog,
    ) -> None:
        seed_git(memory_backend, dotfiles_root)
        add_tool(
            memory_backend,
            dotfiles_root,
            "git",
            target="~/.gitconfig",
            merge_hook="builtin:concat",
            install_hook="builtin:explode",
            layers=[("base", "local", "configs/git/base")],
        )
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})

        registry = default_registry()
        registry.register("explode", lambda config, context: HookResult.failure(1, "nope"))
        orch = Orchestrator(memory_backend, registry=registry)
        orch.init(dotfiles_root)

        result = orch.run("laptop")

        assert result.success
        assert "Install hook failed for git: nope" in caplog.text

    def test_script_hook_sees_machine(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        add_tool(
            memory_backend,
            dotfiles_root,
            "git",
            target="~/.gitconfig",
            merge_hook="merge.sh",
            layers=[("base", "local", "configs/git/base")],
        )
        memory_backend.set_file(f"{dotfiles_root}/tools/git/merge.sh", "#!/bin/bash\n")
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})

        result = orchestrator.run("laptop")

        assert result.success
        env = memory_backend.processes[-1]["env"]
        assert env["MACHINE"] == "laptop"
        assert env["LAYERS"] == "base"


class TestRepositories:
    def test_referenced_repos_are_cloned_before_resolution(
        self, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        add_repos(
            memory_backend,
            dotfiles_root,
            [{"name": "WORK", "url": "git@host:work.git", "path": "/repos/work"}],
        )
        add_tool(
            memory_backend,
            dotfiles_root,
            "git",
            target="~/.gitconfig",
            merge_hook="builtin:skip",
            layers=[("work", "WORK", "git")],
        )
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})
        orch = Orchestrator(memory_backend)
        orch.init(dotfiles_root)

        result = orch.run("laptop")

        assert result.success
        assert "run:git clone git@host:work.git /repos/work" in memory_backend.calls

    def test_dry_run_never_clones(self, memory_backend: MemoryBackend, dotfiles_root: str) -> None:
        add_repos(memory_backend, dotfiles_root, [{"name": "WORK", "url": "u", "path": "/repos/w"}])
        add_tool(
            memory_backend,
            dotfiles_root,
            "git",
            target="~/.gitconfig",
            merge_hook="builtin:concat",
            layers=[("work", "WORK", "git")],
        )
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})
        orch = Orchestrator(memory_backend)
        orch.init(dotfiles_root, dry_run=True)

        orch.run("laptop")

        assert memory_backend.processes == []


class TestDryRun:
    def test_zero_mutation_and_success(
        self, memory_backend: MemoryBackend, dotfiles_root: str, caplog
    ) -> None:
        seed_git(memory_backend, dotfiles_root)
        add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})
        orch = Orchestrator(memory_backend)
        orch.init(dotfiles_root, dry_run=True)

        with caplog.at_level("INFO"):
            result = orch.run("laptop")

        assert result.success
        assert result.dry_run
        assert result.outcomes[0].message == "dry run"
        assert memory_backend.calls == []
        assert not memory_backend.exists(GITCONFIG)
        assert "[DRY-RUN] git" in caplog.text


class TestRunTool:
    def test_single_tool_uses_all_layers(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        seed_git(memory_backend, dotfiles_root)

        result = orchestrator.run_tool("git")

        assert result.success
        content = memory_backend.read_text(GITCONFIG)
        assert "BASE" in content and "WORK" in content

    def test_explicit_layer_subset(
        self, orchestrator: Orchestrator, memory_backend: MemoryBackend, dotfiles_root: str
    ) -> None:
        seed_git(memory_backend, dotfiles_root)

        result = orchestrator.run_tool("git", layers=["work"])

        assert result.success
        assert memory_backend.read_text(GITCONFIG).count("WORK") == 1
        assert "BASE" not in memory_backend.read_text(GITCONFIG)

    def test_tool_name_required(self, orchestrator: Orchestrator) -> None:
        with pytest.raises(InvalidInputError):
            orchestrator.run_tool("")


class TestResultRecords:
    def test_run_result_to_dict(self) -> None:
        result = RunResult(profile="p")
        result.outcomes.append(ToolOutcome("a", ToolStatus.SUCCEEDED, files_modified=["/x"]))
        result.outcomes.append(ToolOutcome("b", ToolStatus.FAILED, "boom"))
        result.outcomes.append(ToolOutcome("c", ToolStatus.SKIPPED))

        payload = result.to_dict()

        assert payload["tools_processed"] == 3
        assert payload["succeeded"] == 1
        assert payload["failed"] == 1
        assert payload["skipped"] == 1
        assert payload["failed_tools"] == ["b"]
        assert payload["success"] is False
        assert payload["tools"][0] == {
            "name": "a",
            "status": "succeeded",
            "message": "",
            "files_modified": ["/x"],
        }
        json.dumps(payload)

    def test_empty_result_is_success(self) -> None:
        assert RunResult().success


def test_custom_registry_isolated(memory_backend: MemoryBackend, dotfiles_root: str) -> None:
    """A registry without builtins makes every builtin hook fail cleanly."""
    seed_git(memory_backend, dotfiles_root)
    add_profile(memory_backend, dotfiles_root, "laptop", {"git": []})
    orch = Orchestrator(memory_backend, registry=StrategyRegistry())
    orch.init(dotfiles_root)

    result = orch.run("laptop")

    assert result.failed_tools == ["git"]
    assert "Unknown builtin strategy: concat" in result.outcomes[0].message


def test_raising_handler_fails_only_its_tool(
    memory_backend: MemoryBackend, dotfiles_root: str
) -> None:
    def explode(config, context) -> HookResult:
        raise RuntimeError("handler bug")

    registry = default_registry()
    registry.register("explode", explode)
    seed_git(memory_backend, dotfiles_root)
    add_tool(
        memory_backend,
        dotfiles_root,
        "aaa",
        target="~/.aaa",
        merge_hook="builtin:explode",
        layers=[("base", "local", "configs/git/base")],
    )
    add_profile(memory_backend, dotfiles_root, "laptop", {"aaa": [], "git": []})
    orch = Orchestrator(memory_backend, registry=registry)
    orch.init(dotfiles_root)

    result = orch.run("laptop")

    assert result.failed_tools == ["aaa"]
    assert result.outcomes[0].message == "RuntimeError: handler bug"
    assert result.succeeded == 1
    assert memory_backend.exists(GITCONFIG)
