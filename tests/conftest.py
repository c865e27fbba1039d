"""Pytest fixtures for git-worktree-keeper tests"""
import io
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest
from rich.console import Console

from git_worktree_keeper.config import AddSettings, Config, RmSettings
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.models import Worktree
from git_worktree_keeper.services.editor_service import EditorService
from git_worktree_keeper.services.git import GitOperations
from git_worktree_keeper.services.github_service import GitHubService
from git_worktree_keeper.services.hook_service import HookService
from git_worktree_keeper.services.picker import TextualPicker
from git_worktree_keeper.services.sync_service import SyncService


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve symlinks so paths compare equal to what git reports
        yield Path(tmpdir).resolve()


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path, monkeypatch):
    """Keep tests away from the user's real configuration."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GH_TOKEN", raising=False)


@pytest.fixture
def mock_config():
    """Default configuration."""
    return Config()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    repo.git.branch("-M", "main")

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def git_repo_with_branches(git_repo):
    """Repository with a merged branch and an unmerged branch."""
    repo = git_repo
    repo_path = Path(repo.working_dir)

    # Merged: no commits beyond main
    repo.git.branch("feature/merged")

    # Unmerged: one commit main does not have
    repo.git.checkout("-b", "feature/unmerged")
    (repo_path / "feature.txt").write_text("Feature content\n")
    repo.index.add(["feature.txt"])
    repo.index.commit("Add feature")

    repo.git.checkout("main")

    yield repo


@pytest.fixture
def git_repo_with_remote(git_repo, temp_dir):
    """Repository whose origin is a local bare repo holding a remote-only branch."""
    remote_path = temp_dir / "origin.git"
    git.Repo.init(remote_path, bare=True)
    git_repo.create_remote("origin", str(remote_path))
    git_repo.git.push("origin", "main")

    # Push a branch, then drop the local copy so it only exists on the remote
    git_repo.git.branch("remote-only")
    git_repo.git.push("origin", "remote-only")
    git_repo.git.branch("-D", "remote-only")

    yield git_repo


@pytest.fixture
def sample_worktrees(temp_dir):
    """Main worktree plus two linked ones, backed by real directories."""
    main_path = temp_dir / "repo"
    feature_path = temp_dir / "repo-feature-x"
    bugfix_path = temp_dir / "repo-bugfix"
    for path in (main_path, feature_path, bugfix_path):
        path.mkdir()

    return [
        Worktree(path=str(main_path), branch="main", commit="a" * 40, is_main=True),
        Worktree(path=str(feature_path), branch="feature/x", commit="b" * 40),
        Worktree(path=str(bugfix_path), branch="bugfix", commit="c" * 40),
    ]


@pytest.fixture
def mock_git_ops(sample_worktrees):
    """GitOperations double listing ``sample_worktrees``."""
    git_ops = Mock(spec=GitOperations)
    git_ops.list_worktrees.return_value = sample_worktrees
    git_ops.list_branches.return_value = ["main", "feature/x", "bugfix", "feature/new"]
    git_ops.branch_exists.return_value = True
    git_ops.remote_branch_exists.return_value = False
    git_ops.current_branch.return_value = "main"
    git_ops.is_merged.return_value = True
    return git_ops


@pytest.fixture
def console_output():
    """Console writing into a buffer instead of the terminal."""
    buffer = io.StringIO()
    return Console(file=buffer, width=200), buffer


@pytest.fixture
def make_keeper(mock_git_ops, console_output):
    """Factory building a WorktreeKeeper around mock collaborators."""
    console, _ = console_output

    def _make(config=None, git_ops=None, **overrides):
        collaborators = {
            "branch_source": Mock(spec=GitHubService),
            "picker": Mock(spec=TextualPicker),
            "syncer": Mock(spec=SyncService),
            "hooks": Mock(spec=HookService),
            "editor": Mock(spec=EditorService),
        }
        collaborators.update(overrides)
        return WorktreeKeeper(config or Config(), git_ops or mock_git_ops, console=console,
                              **collaborators)

    return _make


@pytest.fixture
def rm_branch_config():
    """Configuration that deletes branches after removing worktrees."""
    return Config(rm=RmSettings(branch=True))


@pytest.fixture
def open_editor_config():
    """Configuration that opens ``code`` after add."""
    return Config(add=AddSettings(open=True), editor="code")
