"""Git operations service"""

from typing import Optional

import git

from git_worktree_keeper.constants import REMOTE_NAME
from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.services.git.worktrees import WorktreeService, format_git_error, open_repo

logger = get_logger(__name__)


class GitOperations:
    """Branch and worktree commands run against the repository.

    Every call opens the repository fresh from ``repo_path`` (or the current
    working directory when no path was given), so relocating the process
    changes which checkout the commands see.
    """

    def __init__(self, repo_path: Optional[str] = None, remote_name: str = REMOTE_NAME):
        """Initialize the service.

        Args:
            repo_path: Path inside the git repository; None means the cwd at call time
            remote_name: Remote used for existence probes and fetches
        """
        self.repo_path = repo_path
        self.remote_name = remote_name
        self.worktree_service = WorktreeService(repo_path)

    def _get_repo(self) -> git.Repo:
        """Get a fresh git.Repo instance.

        GitPython repos are lightweight - they don't clone, just open the existing repo.
        """
        return open_repo(self.repo_path)

    def _run(self, operation: str, branch: Optional[str], command: str, *args) -> str:
        """Run ``git <command> <args>`` and wrap failures in GitOperationError."""
        repo = self._get_repo()
        try:
            return getattr(repo.git, command)(*args)
        except git.exc.GitCommandError as e:
            message, status = format_git_error(e)
            raise GitOperationError(operation, branch, message, status) from e

    # Worktrees

    def list_worktrees_raw(self) -> str:
        return self.worktree_service.list_worktrees_raw()

    def list_worktrees(self) -> list[Worktree]:
        return self.worktree_service.list_worktrees()

    def create_worktree(self, path: str, branch: str, create_new_branch: bool,
                        start_point: Optional[str] = None) -> None:
        self.worktree_service.create_worktree(path, branch, create_new_branch, start_point)

    def remove_worktree(self, path: str, force: bool = False) -> None:
        self.worktree_service.remove_worktree(path, force)

    # Branches

    def current_branch(self) -> str:
        """Name of the branch checked out in the cwd; empty for detached HEAD."""
        name = self._run("rev-parse", None, "rev_parse", "--abbrev-ref", "HEAD").strip()
        return "" if name == "HEAD" else name

    def branch_exists(self, name: str) -> bool:
        """Check if a local branch exists."""
        repo = self._get_repo()
        try:
            repo.git.show_ref("--verify", "--quiet", f"refs/heads/{name}")
            return True
        except git.exc.GitCommandError as e:
            if e.status == 1:
                return False
            message, status = format_git_error(e)
            raise GitOperationError("show-ref", name, message, status) from e

    def remote_branch_exists(self, name: str) -> bool:
        """Check if the remote has a branch with this name."""
        if self.remote_name not in [remote.name for remote in self._get_repo().remotes]:
            logger.debug(f"No remote named {self.remote_name}, skipping remote lookup for {name}")
            return False
        output = self._run("ls-remote", name, "ls_remote", "--heads", self.remote_name, name)
        return bool(output.strip())

    def fetch_branch(self, name: str) -> None:
        """Fetch a branch from the remote into a local branch of the same name."""
        logger.info(f"Fetching {name} from {self.remote_name}")
        self._run("fetch", name, "fetch", self.remote_name, f"{name}:{name}")

    def is_merged(self, branch: str) -> bool:
        """Check if ``branch`` is fully merged into HEAD."""
        output = self._run("branch --merged", branch, "branch", "--merged")
        for line in output.splitlines():
            # Strip the "* " (current) and "+ " (other worktree) markers
            name = line[2:].strip() if line[:2] in ("* ", "+ ") else line.strip()
            if name == branch:
                return True
        return False

    def delete_branch(self, name: str, force: bool = False) -> None:
        """Delete a local branch (``-d``, or ``-D`` when forced)."""
        self._run("branch -D" if force else "branch -d", name, "branch", "-D" if force else "-d", name)
        logger.info(f"Deleted branch {name}")

    def list_branches(self) -> list[str]:
        """Local branches followed by remote-only branches (without the remote prefix)."""
        local = self._run("branch", None, "branch", "--format=%(refname:short)")
        remote = self._run("branch -r", None, "branch", "-r", "--format=%(refname:short)")

        seen = set()
        branches = []
        for line in local.splitlines():
            name = line.strip()
            if name and name not in seen:
                seen.add(name)
                branches.append(name)

        prefix = f"{self.remote_name}/"
        for line in remote.splitlines():
            name = line.strip()
            # Skip the origin/HEAD pointer
            if not name or name == self.remote_name or name.endswith("/HEAD"):
                continue
            if name.startswith(prefix):
                name = name[len(prefix):]
            if name not in seen:
                seen.add(name)
                branches.append(name)

        return branches

    def remote_url(self) -> str:
        """URL of the configured remote."""
        return self._run("remote get-url", None, "remote", "get-url", self.remote_name).strip()
