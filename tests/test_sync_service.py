"""Tests for syncing files into a new worktree"""
from pathlib import Path

import pytest

from git_worktree_keeper.config import SyncMode
from git_worktree_keeper.exceptions import SyncError
from git_worktree_keeper.services.sync_service import SyncService, changed_files, ignored_files


class TestStatusParsing:
    """Test extracting paths from porcelain status output."""

    def test_changed_files(self):
        output = " M src/app.py\n?? notes.txt\nA  new.py\n D removed.py\n"
        assert changed_files(output) == ["src/app.py", "notes.txt", "new.py", "removed.py"]

    def test_renames_use_new_name(self):
        assert changed_files("R  old.py -> new.py\n") == ["new.py"]

    def test_quoted_paths(self):
        assert changed_files('?? "with space.txt"\n') == ["with space.txt"]

    def test_ignored_entries_are_not_changes(self):
        assert changed_files("!! .env\n M a.py\n") == ["a.py"]

    def test_ignored_files(self):
        output = "!! .env\n M a.py\n!! build/\n"
        assert ignored_files(output) == [".env", "build/"]


@pytest.fixture
def worktree_pair(git_repo, temp_dir):
    """Main repo with local changes plus an empty destination directory."""
    root = Path(git_repo.working_dir)
    (root / ".gitignore").write_text(".env\nbuild/\n")
    git_repo.index.add([".gitignore"])
    git_repo.index.commit("Add gitignore")

    (root / "README.md").write_text("# Changed\n")
    (root / "src").mkdir()
    (root / "src" / "draft.py").write_text("print('draft')\n")
    (root / ".env").write_text("SECRET=1\n")
    (root / "build").mkdir()
    (root / "build" / "out.bin").write_text("binary\n")

    destination = temp_dir / "test_repo-feature"
    destination.mkdir()
    return root, destination


class TestSyncService:
    """Test copying files between worktrees."""

    def test_none_copies_nothing(self, worktree_pair):
        root, destination = worktree_pair
        assert SyncService().sync(str(destination), "feature", str(root), SyncMode.NONE) == 0
        assert list(destination.iterdir()) == []

    def test_all_copies_changed_and_untracked(self, worktree_pair):
        root, destination = worktree_pair

        copied = SyncService().sync(str(destination), "feature", str(root), SyncMode.ALL)

        assert copied == 2
        assert (destination / "README.md").read_text() == "# Changed\n"
        assert (destination / "src" / "draft.py").exists()
        assert not (destination / ".env").exists()

    def test_all_skips_deleted_files(self, worktree_pair):
        root, destination = worktree_pair
        (root / ".gitignore").unlink()

        SyncService().sync(str(destination), "feature", str(root), SyncMode.ALL)

        assert not (destination / ".gitignore").exists()

    def test_ignored_copies_regular_files_only(self, worktree_pair):
        root, destination = worktree_pair

        copied = SyncService().sync(str(destination), "feature", str(root), SyncMode.IGNORED)

        assert copied == 1
        assert (destination / ".env").read_text() == "SECRET=1\n"
        assert not (destination / "build").exists()
        assert not (destination / "README.md").exists()

    def test_not_a_repository(self, temp_dir):
        with pytest.raises(SyncError):
            SyncService().sync(str(temp_dir / "dst"), "feature", str(temp_dir), SyncMode.ALL)
