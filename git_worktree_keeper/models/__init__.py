"""Data models for git-worktree-keeper."""

from .worktree import Worktree
from .outcome import AddOutcome, AddStatus, BranchDeletion, RemovalOutcome, RemovalStatus

__all__ = [
    "Worktree",
    "AddOutcome",
    "AddStatus",
    "BranchDeletion",
    "RemovalOutcome",
    "RemovalStatus",
]
