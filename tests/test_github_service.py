"""Tests for GitHubService"""
from unittest.mock import Mock, patch

import pytest
from github import GithubException

from git_worktree_keeper.exceptions import GitHubAPIError, GitOperationError, InvalidInputError
from git_worktree_keeper.services.git import GitOperations
from git_worktree_keeper.services.github_service import (
    GitHubService,
    parse_pr_identifier,
    parse_remote_url,
)


@pytest.fixture
def mock_remote_git_ops():
    git_ops = Mock(spec=GitOperations)
    git_ops.remote_url.return_value = "git@github.com:acme/widgets.git"
    return git_ops


@pytest.fixture
def mock_github_client():
    """Github client whose PR #42 has head branch feature/answer."""
    with patch("git_worktree_keeper.services.github_service.Github") as mock_github_cls:
        client = mock_github_cls.return_value
        pull = Mock()
        pull.head.ref = "feature/answer"
        client.get_repo.return_value.get_pull.return_value = pull
        yield mock_github_cls


class TestParsePrIdentifier:
    """Test PR identifier formats."""

    def test_number(self):
        assert parse_pr_identifier("123") == (123, None, None)

    def test_hash_number(self):
        assert parse_pr_identifier("#123") == (123, None, None)

    def test_url(self):
        assert parse_pr_identifier("https://github.com/acme/widgets/pull/7") == (7, "acme", "widgets")

    def test_url_without_scheme(self):
        assert parse_pr_identifier("github.com/acme/widgets/pull/7/files") == (7, "acme", "widgets")

    def test_invalid(self):
        with pytest.raises(InvalidInputError):
            parse_pr_identifier("feature/x")


class TestParseRemoteUrl:
    """Test owner/repo extraction from remotes."""

    @pytest.mark.parametrize("url", [
        "git@github.com:acme/widgets.git",
        "git@github.com:acme/widgets",
        "ssh://git@github.com/acme/widgets.git",
        "https://github.com/acme/widgets.git",
        "https://github.com/acme/widgets",
        "https://token@github.com/acme/widgets.git",
    ])
    def test_github_remotes(self, url):
        assert parse_remote_url(url) == ("acme", "widgets")

    def test_non_github_remote(self):
        with pytest.raises(InvalidInputError):
            parse_remote_url("git@gitlab.com:acme/widgets.git")


class TestGetToken:
    """Test token discovery."""

    def test_explicit_token(self, mock_remote_git_ops):
        assert GitHubService(mock_remote_git_ops, token="abc").get_token() == "abc"

    def test_github_token_env(self, mock_remote_git_ops, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")
        monkeypatch.setenv("GH_TOKEN", "second")
        assert GitHubService(mock_remote_git_ops).get_token() == "from-env"

    def test_gh_token_env(self, mock_remote_git_ops, monkeypatch):
        monkeypatch.setenv("GH_TOKEN", "second")
        assert GitHubService(mock_remote_git_ops).get_token() == "second"

    @patch("git_worktree_keeper.services.github_service.subprocess.run")
    def test_gh_cli(self, mock_run, mock_remote_git_ops):
        mock_run.return_value = Mock(returncode=0, stdout="gho_cli\n")
        assert GitHubService(mock_remote_git_ops).get_token() == "gho_cli"

    @patch("git_worktree_keeper.services.github_service.subprocess.run", side_effect=FileNotFoundError("gh"))
    def test_no_token_anywhere(self, mock_run, mock_remote_git_ops):
        with pytest.raises(GitHubAPIError, match="GitHub token not found"):
            GitHubService(mock_remote_git_ops).get_token()


class TestResolvePrToBranch:
    """Test PR to branch lookup."""

    def test_number_uses_origin(self, mock_remote_git_ops, mock_github_client):
        service = GitHubService(mock_remote_git_ops, token="t")

        assert service.resolve_pr_to_branch("42", "widgets") == "feature/answer"

        client = mock_github_client.return_value
        client.get_repo.assert_called_once_with("acme/widgets")
        client.get_repo.return_value.get_pull.assert_called_once_with(42)

    def test_url_skips_remote_lookup(self, mock_remote_git_ops, mock_github_client):
        service = GitHubService(mock_remote_git_ops, token="t")

        service.resolve_pr_to_branch("https://github.com/other/fork/pull/42", "widgets")

        mock_remote_git_ops.remote_url.assert_not_called()
        mock_github_client.return_value.get_repo.assert_called_once_with("other/fork")

    def test_client_is_reused(self, mock_remote_git_ops, mock_github_client):
        service = GitHubService(mock_remote_git_ops, token="t")
        service.resolve_pr_to_branch("1", "widgets")
        service.resolve_pr_to_branch("2", "widgets")
        assert mock_github_client.call_count == 1

    def test_api_error(self, mock_remote_git_ops, mock_github_client):
        client = mock_github_client.return_value
        client.get_repo.return_value.get_pull.side_effect = GithubException(404, {"message": "Not Found"}, None)
        service = GitHubService(mock_remote_git_ops, token="t")

        with pytest.raises(GitHubAPIError) as exc_info:
            service.resolve_pr_to_branch("999", "widgets")

        assert exc_info.value.status == 404
        assert "Not Found" in str(exc_info.value)

    def test_missing_remote(self, mock_remote_git_ops, mock_github_client):
        mock_remote_git_ops.remote_url.side_effect = GitOperationError("remote get-url", message="No such remote")
        service = GitHubService(mock_remote_git_ops, token="t")

        with pytest.raises(GitHubAPIError):
            service.resolve_pr_to_branch("1", "widgets")

    def test_close(self, mock_remote_git_ops, mock_github_client):
        service = GitHubService(mock_remote_git_ops, token="t")
        service.resolve_pr_to_branch("1", "widgets")

        service.close()

        mock_github_client.return_value.close.assert_called_once()
        assert service.github is None
