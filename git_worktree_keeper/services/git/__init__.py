"""Git-related services for git-worktree-keeper."""

from .operations import GitOperations
from .worktrees import WorktreeService, parse_worktree_list

__all__ = [
    "GitOperations",
    "WorktreeService",
    "parse_worktree_list",
]
