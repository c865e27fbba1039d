"""Worktree listing and lifecycle commands for git-worktree-keeper."""

import os
from typing import Dict, Optional

import git

from git_worktree_keeper.constants import BRANCH_REF_PREFIX
from git_worktree_keeper.exceptions import GitOperationError, ParseError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import Worktree

logger = get_logger(__name__)

# Keys that describe a worktree and must follow its "worktree" line
_RECORD_KEYS = ("HEAD", "branch", "detached")


def _strip_branch_ref(ref: str) -> str:
    """Turn "refs/heads/feature/x" into "feature/x"."""
    if ref.startswith(BRANCH_REF_PREFIX):
        return ref[len(BRANCH_REF_PREFIX):]
    return ref


def _mark_main_worktree(records: list[Dict[str, str]]) -> list[Worktree]:
    """Build Worktree objects, flagging the main one.

    git always reports the primary checkout first, so the first record is the
    main worktree.
    """
    return [
        Worktree(
            path=record["path"],
            branch=record.get("branch", ""),
            commit=record.get("HEAD", ""),
            is_main=index == 0,
        )
        for index, record in enumerate(records)
    ]


def parse_worktree_list(output: str) -> list[Worktree]:
    """Parse ``git worktree list --porcelain`` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    Unknown keys are ignored and records without a ``worktree`` line are
    dropped.

    Raises:
        ParseError: if a HEAD/branch/detached line precedes its worktree line
    """
    records: list[Dict[str, str]] = []
    current: Dict[str, str] = {}
    has_path = False

    for line_number, raw_line in enumerate(output.splitlines(), start=1):
        line = raw_line.rstrip("\r")

        if not line.strip():
            # Empty line marks end of worktree entry
            if has_path:
                records.append(current)
            current = {}
            has_path = False
            continue

        key, _, value = line.partition(" ")

        if key == "worktree":
            if has_path:
                # Two worktree lines without a separator; close the previous record
                records.append(current)
            current = {"path": value}
            has_path = True
        elif key in _RECORD_KEYS:
            if not has_path:
                raise ParseError(line_number, line, f"'{key}' line without a preceding 'worktree' line")
            if key == "HEAD":
                current["HEAD"] = value
            elif key == "branch":
                current["branch"] = _strip_branch_ref(value)
            else:
                current["branch"] = ""  # Detached HEAD

    # Handle last entry if no trailing blank line
    if has_path:
        records.append(current)

    return _mark_main_worktree(records)


def format_git_error(e: git.exc.GitCommandError) -> tuple[str, object]:
    """Extract a readable message and exit status from a GitCommandError."""
    stderr = (e.stderr if getattr(e, "stderr", None) else str(e)).strip()
    # GitPython wraps stderr as "stderr: '...'"
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip().strip("'").strip()
    status = getattr(e, "status", None)
    return stderr, status


def open_repo(repo_path: Optional[str] = None) -> git.Repo:
    """Open the repository containing ``repo_path`` (or the cwd at call time).

    Raises:
        GitOperationError: if the path is not inside a repository, or the cwd
            was deleted out from under the process
    """
    if repo_path:
        path = repo_path
    else:
        try:
            path = os.getcwd()
        except FileNotFoundError as e:
            raise GitOperationError("open", message="current directory no longer exists") from e
    try:
        return git.Repo(path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise GitOperationError("open", message=f"not a git repository: {path}") from e


class WorktreeService:
    """Service for listing, creating and removing git worktrees."""

    def __init__(self, repo_path: Optional[str] = None):
        """Initialize the worktree service.

        Args:
            repo_path: Path inside the git repository; None means the current
                working directory at call time.
        """
        self.repo_path = repo_path

    def _get_repo(self) -> git.Repo:
        return open_repo(self.repo_path)

    def list_worktrees_raw(self) -> str:
        """Return the porcelain worktree listing."""
        repo = self._get_repo()
        try:
            return repo.git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            message, status = format_git_error(e)
            raise GitOperationError("worktree list", message=message, status=status) from e

    def list_worktrees(self) -> list[Worktree]:
        """Get all worktrees, main worktree first."""
        worktrees = parse_worktree_list(self.list_worktrees_raw())
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def create_worktree(self, path: str, branch: str, create_new_branch: bool,
                        start_point: Optional[str] = None) -> None:
        """Create a worktree at ``path`` checking out ``branch``.

        Args:
            path: Directory for the new worktree
            branch: Branch to check out (or create)
            create_new_branch: Create ``branch`` instead of checking out an existing one
            start_point: Commit-ish the new branch starts from
        """
        args = ["add"]
        if create_new_branch:
            args += ["-b", branch, path]
            if start_point:
                args.append(start_point)
        else:
            args += [path, branch]

        repo = self._get_repo()
        try:
            repo.git.worktree(*args)
        except git.exc.GitCommandError as e:
            message, status = format_git_error(e)
            raise GitOperationError("worktree add", branch, message, status) from e
        logger.info(f"Created worktree at {path} for {branch}")

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove the worktree at ``path``.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked
        """
        args = ["remove"]
        if force:
            args.append("--force")
        args.append(path)

        repo = self._get_repo()
        try:
            repo.git.worktree(*args)
        except git.exc.GitCommandError as e:
            message, status = format_git_error(e)
            logger.error(f"Failed to remove worktree at {path}: {message}")
            raise GitOperationError("worktree remove", message=message, status=status) from e
        logger.info(f"Removed worktree at {path}")

