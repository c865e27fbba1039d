"""File sync from the main worktree into a newly created one."""

import os
import shutil

import git

from git_worktree_keeper.config import SyncMode
from git_worktree_keeper.exceptions import SyncError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.git.worktrees import format_git_error

logger = get_logger(__name__)


def changed_files(status_output: str) -> list[str]:
    """Paths from ``git status --porcelain`` worth copying (renames use the new name)."""
    paths = []
    for line in status_output.splitlines():
        if len(line) < 4 or line.startswith("!!"):
            continue
        path = line[3:].strip()
        if " -> " in path:
            path = path.split(" -> ", 1)[1].strip()
        if path:
            paths.append(path.strip('"'))
    return paths


def ignored_files(status_output: str) -> list[str]:
    """Paths marked ``!!`` in ``git status --ignored --porcelain`` output."""
    return [
        line[3:].strip().strip('"')
        for line in status_output.splitlines()
        if line.startswith("!!") and len(line) >= 4 and line[3:].strip()
    ]


class SyncService:
    """Copies uncommitted or ignored files between worktrees."""

    def sync(self, worktree_path: str, branch: str, repo_root: str, mode: SyncMode) -> int:
        """Copy files from ``repo_root`` into ``worktree_path``.

        Returns:
            Number of files copied

        Raises:
            SyncError: if the source worktree's status cannot be read
        """
        if mode == SyncMode.NONE:
            return 0

        try:
            repo = git.Repo(repo_root)
            if mode == SyncMode.ALL:
                paths = changed_files(repo.git.status("--porcelain", "--untracked-files=all"))
            else:
                paths = ignored_files(repo.git.status("--porcelain", "--ignored"))
        except git.exc.GitCommandError as e:
            message, status = format_git_error(e)
            raise SyncError("git status", message, status) from e
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise SyncError("git status", f"not a git repository: {repo_root}") from e

        copied = 0
        for path in paths:
            src = os.path.join(repo_root, path)
            dst = os.path.join(worktree_path, path)

            # Deleted files and ignored directories are skipped
            if not os.path.isfile(src):
                continue

            try:
                os.makedirs(os.path.dirname(dst), exist_ok=True)
                shutil.copy2(src, dst)
                copied += 1
            except OSError as e:
                logger.warning(f"Failed to copy {path}: {e}")

        logger.info(f"Synced {copied} {mode.value} files into {worktree_path} for {branch}")
        return copied
