"""Tests for project hooks"""
from pathlib import Path

import pytest

from git_worktree_keeper.exceptions import ConfigError, HookError
from git_worktree_keeper.services.hook_service import (
    Hook,
    HookService,
    HookType,
    ProjectConfig,
    load_project_config,
)


def write_project_config(repo_root: Path, text: str) -> None:
    (repo_root / "gw.yaml").write_text(text)


class TestLoadProjectConfig:
    """Test reading gw.yaml."""

    def test_missing_file(self, temp_dir):
        assert load_project_config(str(temp_dir)) is None

    def test_hooks_by_type(self, temp_dir):
        write_project_config(temp_dir, """
hooks:
  post_add:
    - command: npm install
      env:
        NODE_ENV: development
    - command: echo done
  pre_remove:
    - command: make clean
""")
        config = load_project_config(str(temp_dir))

        assert config.hooks[HookType.POST_ADD] == [
            Hook("npm install", {"NODE_ENV": "development"}),
            Hook("echo done", {}),
        ]
        assert config.hooks[HookType.PRE_REMOVE] == [Hook("make clean")]
        assert config.hooks[HookType.PRE_ADD] == []

    def test_empty_file(self, temp_dir):
        write_project_config(temp_dir, "")
        config = load_project_config(str(temp_dir))
        assert all(hooks == [] for hooks in config.hooks.values())

    def test_invalid_yaml(self, temp_dir):
        write_project_config(temp_dir, "hooks: [\n")
        with pytest.raises(ConfigError):
            load_project_config(str(temp_dir))

    def test_hook_list_must_be_a_list(self, temp_dir):
        write_project_config(temp_dir, "hooks:\n  post_add: echo hi\n")
        with pytest.raises(ConfigError, match="must be a list"):
            load_project_config(str(temp_dir))


class TestRunHooks:
    """Test executing hooks with sh."""

    def test_no_config_is_a_no_op(self, temp_dir):
        HookService().run("post_add", str(temp_dir / "wt"), "feature", str(temp_dir))

    def test_environment_and_cwd(self, temp_dir):
        write_project_config(temp_dir, """
hooks:
  post_add:
    - command: 'echo "$GW_BRANCH|$GW_WORKTREE_PATH|$GW_REPO_ROOT|$EXTRA|$(pwd)" > hook.out'
      env:
        EXTRA: extra-value
""")
        wt_path = str(temp_dir / "repo-feature")

        HookService().run(HookType.POST_ADD, wt_path, "feature", str(temp_dir))

        output = (temp_dir / "hook.out").read_text().strip()
        assert output == f"feature|{wt_path}|{temp_dir}|extra-value|{temp_dir}"

    def test_gw_variables_take_precedence(self, temp_dir):
        config = ProjectConfig(hooks={
            HookType.PRE_ADD: [Hook('echo "$GW_BRANCH" > branch.out', {"GW_BRANCH": "user-value"})],
        })

        HookService(config).run("pre_add", str(temp_dir / "wt"), "real", str(temp_dir))

        assert (temp_dir / "branch.out").read_text().strip() == "real"

    def test_hooks_run_in_order(self, temp_dir):
        config = ProjectConfig(hooks={
            HookType.POST_ADD: [Hook("echo one >> order.out"), Hook("echo two >> order.out")],
        })

        HookService(config).run("post_add", "", "b", str(temp_dir))

        assert (temp_dir / "order.out").read_text().split() == ["one", "two"]

    def test_failure_stops_remaining_hooks(self, temp_dir):
        config = ProjectConfig(hooks={
            HookType.POST_ADD: [Hook("exit 3"), Hook("touch never.out")],
        })

        with pytest.raises(HookError) as exc_info:
            HookService(config).run("post_add", "", "b", str(temp_dir))

        assert exc_info.value.status == 3
        assert exc_info.value.index == 0
        assert str(exc_info.value).startswith("post_add hook 1 failed")
        assert not (temp_dir / "never.out").exists()

    def test_empty_command_is_an_error(self, temp_dir):
        config = ProjectConfig(hooks={HookType.PRE_REMOVE: [Hook("")]})

        with pytest.raises(HookError, match="requires a 'command'"):
            HookService(config).run("pre_remove", "", "b", str(temp_dir))

    def test_only_requested_type_runs(self, temp_dir):
        config = ProjectConfig(hooks={
            HookType.PRE_ADD: [Hook("touch pre.out")],
            HookType.POST_ADD: [Hook("touch post.out")],
        })

        HookService(config).run("post_add", "", "b", str(temp_dir))

        assert (temp_dir / "post.out").exists()
        assert not (temp_dir / "pre.out").exists()

    def test_unknown_hook_type(self, temp_dir):
        with pytest.raises(ValueError):
            HookService().run("on_merge", "", "b", str(temp_dir))
