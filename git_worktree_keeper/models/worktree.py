"""Worktree data models."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Worktree:
    """A single checkout reported by ``git worktree list``."""

    path: str
    branch: str  # Empty when HEAD is detached
    commit: str
    is_main: bool = False  # Is this the main working tree?

    @property
    def name(self) -> str:
        """Directory name of the worktree."""
        return os.path.basename(self.path.rstrip("/\\")) or self.path

    @property
    def short_commit(self) -> str:
        return self.commit[:7]

    @property
    def is_detached(self) -> bool:
        return not self.branch

    @property
    def is_orphaned(self) -> bool:
        """True if the worktree directory no longer exists on disk."""
        return not os.path.exists(self.path)

    def __str__(self) -> str:
        """String representation of worktree."""
        branch = self.branch or "(detached)"
        main_marker = " (main)" if self.is_main else ""
        return f"{branch} @ {self.path}{main_marker}"
