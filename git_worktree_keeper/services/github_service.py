"""GitHub pull request lookup service"""

import os
import re
import subprocess
from typing import Optional

from github import Auth, Github, GithubException

from git_worktree_keeper.exceptions import GitHubAPIError, GitOperationError, InvalidInputError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.git.operations import GitOperations

logger = get_logger(__name__)

PR_URL_PATTERN = re.compile(r"(?:https?://)?(?:www\.)?github\.com/([^/]+)/([^/]+)/pull/(\d+)")
SSH_REMOTE_PATTERN = re.compile(r"^(?:ssh://)?(?:[^@/]+@)?(?:[^:/]+\.)?github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$")
HTTPS_REMOTE_PATTERN = re.compile(r"^https?://(?:[^@/]+@)?(?:[^/]+\.)?github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$")


def parse_remote_url(remote_url: str) -> tuple[str, str]:
    """Extract (owner, repo) from a GitHub SSH or HTTPS remote URL."""
    url = remote_url.strip()
    for pattern in (HTTPS_REMOTE_PATTERN, SSH_REMOTE_PATTERN):
        match = pattern.match(url)
        if match:
            return match.group(1), match.group(2)
    raise InvalidInputError(remote_url, "not a GitHub remote URL")


def parse_pr_identifier(identifier: str) -> tuple[int, Optional[str], Optional[str]]:
    """Parse a PR number or URL.

    Returns:
        (number, owner, repo); owner and repo are None for a bare number
    """
    identifier = identifier.strip()
    match = PR_URL_PATTERN.search(identifier)
    if match:
        return int(match.group(3)), match.group(1), match.group(2)

    number = identifier[1:] if identifier.startswith("#") else identifier
    if number.isdigit():
        return int(number), None, None

    raise InvalidInputError(identifier, "use a PR number or URL")


class GitHubService:
    """Resolves pull requests to their head branch via the GitHub API."""

    def __init__(self, git_ops: Optional[GitOperations] = None, token: Optional[str] = None):
        self.git_ops = git_ops or GitOperations()
        self._token = token
        self.github: Optional[Github] = None

    def get_token(self) -> str:
        """GitHub token from GITHUB_TOKEN, GH_TOKEN or the gh CLI."""
        token = self._token or os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
        if not token:
            try:
                result = subprocess.run(
                    ["gh", "auth", "token"], capture_output=True, text=True, check=False
                )
                if result.returncode == 0:
                    token = result.stdout.strip()
            except OSError as e:
                logger.debug(f"[GitHub] gh CLI not available: {e}")

        if not token:
            raise GitHubAPIError(
                "authenticate",
                "GitHub token not found. Set GITHUB_TOKEN or GH_TOKEN, or run 'gh auth login'",
            )
        return token

    def _client(self) -> Github:
        if self.github is None:
            self.github = Github(auth=Auth.Token(self.get_token()))
        return self.github

    def resolve_pr_to_branch(self, identifier: str, repo_name: str) -> str:
        """Return the head branch of the pull request named by ``identifier``.

        Args:
            identifier: PR number ("123", "#123") or URL
            repo_name: Local repository name; only used for log context
        """
        number, owner, repo = parse_pr_identifier(identifier)
        if owner is None:
            try:
                owner, repo = parse_remote_url(self.git_ops.remote_url())
            except GitOperationError as e:
                raise GitHubAPIError("get remote", str(e)) from e

        logger.debug(f"[GitHub] Looking up PR #{number} in {owner}/{repo} for {repo_name}")
        try:
            pull = self._client().get_repo(f"{owner}/{repo}").get_pull(number)
        except GithubException as e:
            message = e.data.get("message") if isinstance(e.data, dict) else str(e)
            raise GitHubAPIError(f"get PR #{number}", message, e.status) from e

        branch = pull.head.ref
        logger.info(f"PR #{number} uses branch {branch}")
        return branch

    def close(self) -> None:
        """Close the GitHub API client connection."""
        if self.github is not None:
            self.github.close()
            self.github = None
