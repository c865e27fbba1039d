"""Collaborator interfaces used by the worktree lifecycle orchestrator.

The concrete implementations live next to this module; tests substitute
``Mock(spec=...)`` objects.
"""

from typing import Optional, Protocol, Sequence

from git_worktree_keeper.config import SyncMode
from git_worktree_keeper.models.worktree import Worktree


class VersionControlPort(Protocol):
    def list_worktrees_raw(self) -> str: ...

    def list_worktrees(self) -> list[Worktree]: ...

    def list_branches(self) -> list[str]: ...

    def branch_exists(self, name: str) -> bool: ...

    def remote_branch_exists(self, name: str) -> bool: ...

    def fetch_branch(self, name: str) -> None: ...

    def create_worktree(self, path: str, branch: str, create_new_branch: bool,
                        start_point: Optional[str] = None) -> None: ...

    def remove_worktree(self, path: str, force: bool = False) -> None: ...

    def current_branch(self) -> str: ...

    def is_merged(self, branch: str) -> bool: ...

    def delete_branch(self, name: str, force: bool = False) -> None: ...


class BranchSourcePort(Protocol):
    def resolve_pr_to_branch(self, identifier: str, repo_name: str) -> str: ...


class PickerPort(Protocol):
    def pick_branch(self, candidates: Sequence[str]) -> str:
        """Return the chosen branch, or "" if the user cancelled."""
        ...

    def pick_worktrees(self, worktrees: Sequence[Worktree], exclude_main: bool = False,
                       multi: bool = False) -> list[Worktree]:
        """Return the chosen worktrees, or [] if the user cancelled."""
        ...


class SyncPort(Protocol):
    def sync(self, worktree_path: str, branch: str, repo_root: str, mode: SyncMode) -> int: ...


class HookPort(Protocol):
    def run(self, hook_type: str, worktree_path: str, branch: str, repo_root: str) -> None: ...


class EditorPort(Protocol):
    def open(self, editor: str, worktree_path: str) -> None: ...
