"""ToolConfig / LayerSpec contract tests."""
from __future__ import annotations

import pytest

from dotlayers.core.contracts import LayerSpec, ToolConfig
from dotlayers.core.exceptions import ErrorCode, InvalidInputError, ValidationError


def make_config(**overrides) -> ToolConfig:
    values = {
        "tool_name": "git",
        "target": "~/.gitconfig",
        "merge_hook": "builtin:concat",
    }
    values.update(overrides)
    config = ToolConfig(**values)
    config.add_layer("base", "local", "configs/git/base")
    config.add_layer("work", "WORK_DOTFILES", "git/work")
    return config


class TestToolConfigValidation:
    def test_valid_config_has_no_errors(self) -> None:
        config = make_config()
        assert config.validation_errors() == []
        config.validate()

    @pytest.mark.parametrize(
        "overrides, fragment",
        [
            ({"tool_name": ""}, "tool_name is required"),
            ({"tool_name": "bad name"}, "tool_name must match"),
            ({"target": ""}, "target is required"),
            ({"target": "relative/path"}, "target must be absolute path"),
            ({"merge_hook": ""}, "merge_hook is required"),
            ({"merge_hook": "/path/with space.sh"}, "merge_hook must not contain whitespace"),
            ({"install_hook": "run me.sh"}, "install_hook must not contain whitespace"),
        ],
    )
    def test_each_broken_field_is_named(self, overrides, fragment: str) -> None:
        """A single broken field yields VALIDATION naming that field."""
        config = make_config(**overrides)

        with pytest.raises(ValidationError) as exc_info:
            config.validate()

        assert exc_info.value.code is ErrorCode.VALIDATION
        assert any(fragment in err for err in exc_info.value.errors)
        assert fragment in str(exc_info.value)

    def test_all_violations_are_reported_together(self) -> None:
        config = ToolConfig(tool_name="", target="nope", merge_hook="")
        config.add_layer("x", "lowercase_repo", "/abs")

        errors = config.validation_errors()

        assert "tool_name is required" in errors
        assert "target must be absolute path (start with / or ~): nope" in errors
        assert "merge_hook is required" in errors
        assert "layer 0: source must be 'local' or REPO_NAME: lowercase_repo" in errors
        assert "layer 0: path must be relative (not start with /): /abs" in errors

    def test_builtin_hooks_skip_whitespace_rule(self) -> None:
        config = make_config(merge_hook="builtin:json-merge")
        assert config.validation_errors() == []

    def test_target_may_start_with_tilde_or_slash(self) -> None:
        assert make_config(target="/etc/foo").validation_errors() == []
        assert make_config(target="~/.zshrc").validation_errors() == []


class TestToolConfigLayers:
    def test_add_layer_returns_index_and_keeps_order(self) -> None:
        config = ToolConfig(tool_name="zsh", target="~/.zshrc", merge_hook="builtin:source")
        assert config.add_layer("a", "local", "a") == 0
        assert config.add_layer("b", "local", "b") == 1
        assert config.layer_names() == ["a", "b"]
        assert config.layer_count == 2

    def test_layer_out_of_range_raises_invalid_input(self) -> None:
        config = make_config()
        with pytest.raises(InvalidInputError, match="out of range"):
            config.layer(5)
        with pytest.raises(InvalidInputError):
            config.layer(-1)

    def test_set_layer_resolved(self) -> None:
        config = make_config()
        config.set_layer_resolved(1, "/repos/work/git/work")
        assert config.layer(1).is_resolved
        assert config.resolved_paths() == ["", "/repos/work/git/work"]

    def test_find_layer(self) -> None:
        config = make_config()
        layer = config.find_layer("work")
        assert layer is not None and layer.source == "WORK_DOTFILES"
        assert config.find_layer("missing") is None

    def test_install_hook(self) -> None:
        config = make_config()
        assert not config.has_install_hook
        config.set_install_hook("builtin:skip")
        assert config.has_install_hook


class TestSelectLayers:
    def test_requested_order_wins_over_declaration_order(self) -> None:
        config = make_config()
        selected, missing = config.select_layers(["work", "base"])
        assert selected.layer_names() == ["work", "base"]
        assert missing == []

    def test_subset_keeps_only_requested(self) -> None:
        config = make_config()
        selected, _ = config.select_layers(["base"])
        assert selected.layer_names() == ["base"]
        # original untouched
        assert config.layer_names() == ["base", "work"]

    def test_unknown_names_are_reported(self) -> None:
        config = make_config()
        selected, missing = config.select_layers(["base", "ghost", "base"])
        assert selected.layer_names() == ["base"]
        assert missing == ["ghost"]

    def test_copy_preserves_hooks_env_and_resolution(self) -> None:
        config = make_config(install_hook="install.sh", env={"EDITOR": "vim"})
        config.set_layer_resolved(0, "/dot/configs/git/base")
        selected, _ = config.select_layers(["base"])
        assert selected.install_hook == "install.sh"
        assert selected.env == {"EDITOR": "vim"}
        assert selected.layer(0).resolved_path == "/dot/configs/git/base"
        selected.env["X"] = "1"
        assert "X" not in config.env


class TestLayerSpec:
    def test_spec_and_locality(self) -> None:
        layer = LayerSpec(name="base", source="local", path="a/b")
        assert layer.spec == "local:a/b"
        assert layer.is_local
        assert not layer.is_resolved

    def test_validate_collects_every_error(self) -> None:
        layer = LayerSpec(name="", source="", path="")
        with pytest.raises(ValidationError) as exc_info:
            layer.validate()
        assert exc_info.value.errors == [
            "name is required",
            "source is required",
            "path is required",
        ]
