"""Utility functions for git-worktree-keeper.

This package provides utility modules:
- paths: Scoped working-directory changes
"""

from .paths import working_directory

__all__ = [
    "working_directory",
]
