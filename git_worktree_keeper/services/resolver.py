"""Worktree naming and identifier resolution.

A worktree for branch ``feature/x`` of repository ``repo`` lives in the sibling
directory ``repo-feature-x``. Users may refer to it by branch name, by the bare
suffix, by the full directory name, or by absolute path.
"""

import os
from typing import Iterable, Optional

from git_worktree_keeper.constants import PATH_HOSTILE_CHARS
from git_worktree_keeper.models.worktree import Worktree


def branch_to_suffix(branch: str) -> str:
    """Convert a branch name to a directory suffix ("feature/x" -> "feature-x")."""
    suffix = branch
    for char in PATH_HOSTILE_CHARS:
        suffix = suffix.replace(char, "-")
    return suffix


def worktree_dir_name(repo_name: str, branch: str) -> str:
    """Directory name for a branch's worktree."""
    return f"{repo_name}-{branch_to_suffix(branch)}"


def worktree_path(repo_root: str, repo_name: str, branch: str) -> str:
    """Sibling directory of ``repo_root`` that holds the worktree for ``branch``."""
    return os.path.join(os.path.dirname(os.path.normpath(repo_root)), worktree_dir_name(repo_name, branch))


def parse_worktree_identifier(identifier: str, repo_name: str) -> str:
    """Normalize an identifier to the canonical worktree directory name.

    Supported formats:
        - branch name: "feature/x"
        - suffix: "feature-x"
        - full dir name: "repo-feature-x"
        - full path: "/path/to/repo-feature-x"
    """
    if os.path.isabs(identifier):
        return os.path.basename(os.path.normpath(identifier))

    if identifier.startswith(f"{repo_name}-"):
        return identifier

    return worktree_dir_name(repo_name, identifier)


def find_worktree(identifier: str, repo_name: str, worktrees: Iterable[Worktree]) -> Optional[Worktree]:
    """Return the first worktree matching ``identifier``, or None.

    A worktree matches when its directory name equals the canonical form,
    its branch equals the raw identifier, or its directory name equals the
    raw identifier. Listing order breaks ties.
    """
    target_dir_name = parse_worktree_identifier(identifier, repo_name)

    for wt in worktrees:
        dir_name = os.path.basename(os.path.normpath(wt.path))
        if dir_name == target_dir_name:
            return wt
        if identifier and wt.branch == identifier:
            return wt
        # Bare suffix without the repo name prefix
        if dir_name == identifier:
            return wt

    return None


def find_current_worktree(current_path: str, worktrees: Iterable[Worktree]) -> Optional[Worktree]:
    """Find the worktree containing ``current_path``; the most specific one wins."""
    current_path = os.path.normpath(current_path)

    best_match = None
    longest = 0
    for wt in worktrees:
        wt_path = os.path.normpath(wt.path)
        if current_path == wt_path or current_path.startswith(wt_path + os.sep):
            if len(wt_path) > longest:
                best_match = wt
                longest = len(wt_path)

    return best_match
