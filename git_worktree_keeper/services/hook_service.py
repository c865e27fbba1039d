"""Project hooks declared in the repository's gw.yaml."""

import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

import yaml

from git_worktree_keeper.constants import (
    ENV_BRANCH,
    ENV_REPO_ROOT,
    ENV_WORKTREE_PATH,
    PROJECT_CONFIG_FILE,
)
from git_worktree_keeper.exceptions import ConfigError, HookError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class HookType(Enum):
    PRE_ADD = "pre_add"
    POST_ADD = "post_add"
    PRE_REMOVE = "pre_remove"
    POST_REMOVE = "post_remove"


@dataclass
class Hook:
    """A single shell command run at a lifecycle point."""

    command: str
    env: Dict[str, str] = field(default_factory=dict)


@dataclass
class ProjectConfig:
    """Per-repository configuration."""

    hooks: Dict[HookType, list[Hook]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, document: dict) -> "ProjectConfig":
        hooks_section = document.get("hooks") or {}
        if not isinstance(hooks_section, dict):
            raise ValueError("hooks must be a mapping")

        hooks: Dict[HookType, list[Hook]] = {}
        for hook_type in HookType:
            entries = hooks_section.get(hook_type.value) or []
            if not isinstance(entries, list):
                raise ValueError(f"hooks.{hook_type.value} must be a list")
            hooks[hook_type] = [
                Hook(
                    command=str(entry.get("command") or ""),
                    env={str(k): str(v) for k, v in (entry.get("env") or {}).items()},
                )
                for entry in entries
                if isinstance(entry, dict)
            ]
        return cls(hooks=hooks)


def load_project_config(repo_root: str) -> Optional[ProjectConfig]:
    """Read ``gw.yaml`` from the repository root; None if there is none."""
    path = Path(repo_root) / PROJECT_CONFIG_FILE
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise ConfigError(str(path), f"failed to read project config: {e}") from e

    try:
        return ProjectConfig.from_dict(yaml.safe_load(text) or {})
    except (yaml.YAMLError, ValueError, AttributeError) as e:
        raise ConfigError(str(path), f"failed to parse project config: {e}") from e


class HookService:
    """Runs project hooks sequentially, stopping at the first failure."""

    def __init__(self, project_config: Optional[ProjectConfig] = None):
        # None means "load gw.yaml from the repo root on first use"
        self._project_config = project_config
        self._loaded_from: Optional[str] = None

    def _config_for(self, repo_root: str) -> Optional[ProjectConfig]:
        if self._project_config is not None and self._loaded_from is None:
            return self._project_config
        if self._loaded_from != repo_root:
            self._project_config = load_project_config(repo_root)
            self._loaded_from = repo_root
        return self._project_config

    def run(self, hook_type, worktree_path: str, branch: str, repo_root: str) -> None:
        """Execute every hook of ``hook_type``.

        Raises:
            HookError: if a hook has no command or exits non-zero
        """
        hook_type = HookType(hook_type)
        project_config = self._config_for(repo_root)
        if project_config is None:
            return

        hooks = project_config.hooks.get(hook_type, [])
        for index, hook in enumerate(hooks):
            if not hook.command:
                raise HookError(hook_type.value, index, "", "hook requires a 'command' field")

            logger.info(f"Running {hook_type.value} hook {index + 1}: {hook.command}")
            env = dict(os.environ)
            env.update(hook.env)
            # gw-specific variables take precedence over user-defined ones
            env[ENV_WORKTREE_PATH] = worktree_path
            env[ENV_BRANCH] = branch
            env[ENV_REPO_ROOT] = repo_root

            try:
                result = subprocess.run(["sh", "-c", hook.command], cwd=repo_root, env=env, check=False)
            except OSError as e:
                raise HookError(hook_type.value, index, hook.command, str(e)) from e

            if result.returncode != 0:
                raise HookError(hook_type.value, index, hook.command, status=result.returncode)
