"""Core functionality for git-worktree-keeper"""

import os
from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.config import Config, SyncMode, determine_sync_mode
from git_worktree_keeper.constants import (
    PROTECTED_BRANCHES,
    SYMBOL_FAILED,
    SYMBOL_INFO,
    SYMBOL_OK,
    SYMBOL_WARNING,
)
from git_worktree_keeper.exceptions import (
    BranchNotFoundError,
    ConfigError,
    EditorError,
    GitOperationError,
    HookError,
    NotInWorktreeError,
    SafetyRefusal,
    SyncError,
    WorktreeNotFoundError,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models import (
    AddOutcome,
    AddStatus,
    BranchDeletion,
    RemovalOutcome,
    RemovalStatus,
    Worktree,
)
from git_worktree_keeper.services.ports import (
    BranchSourcePort,
    EditorPort,
    HookPort,
    PickerPort,
    SyncPort,
    VersionControlPort,
)
from git_worktree_keeper.services.resolver import (
    find_current_worktree,
    find_worktree,
    worktree_path,
)
from git_worktree_keeper.utils import working_directory

logger = get_logger(__name__)


class WorktreeKeeper:
    """Creates and removes worktrees for a repository.

    All external effects go through the collaborators passed in, so the
    lifecycle rules can be exercised with mocks.
    """

    def __init__(
        self,
        config: Config,
        git_ops: VersionControlPort,
        branch_source: Optional[BranchSourcePort] = None,
        picker: Optional[PickerPort] = None,
        syncer: Optional[SyncPort] = None,
        hooks: Optional[HookPort] = None,
        editor: Optional[EditorPort] = None,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.git_ops = git_ops
        self.branch_source = branch_source
        self.picker = picker
        self.syncer = syncer
        self.hooks = hooks
        self.editor = editor
        self.console = console or Console()

    def _console_print(self, *args, **kwargs):
        self.console.print(*args, **kwargs)

    def _warn(self, warnings: list[str], message: str) -> None:
        warnings.append(message)
        logger.debug(message)
        self._console_print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")

    # Queries

    def list_worktrees(self) -> list[Worktree]:
        return self.git_ops.list_worktrees()

    def main_worktree(self, worktrees: Optional[Iterable[Worktree]] = None) -> Worktree:
        """The repository's primary checkout."""
        if worktrees is None:
            worktrees = self.list_worktrees()
        for wt in worktrees:
            if wt.is_main:
                return wt
        raise GitOperationError("worktree list", message="no main worktree found")

    def repo_name(self, worktrees: Optional[Iterable[Worktree]] = None) -> str:
        """Repository name, taken from the main worktree's directory."""
        return self.main_worktree(worktrees).name

    def find(self, identifier: str, worktrees: Optional[list[Worktree]] = None) -> Worktree:
        """Resolve ``identifier`` to a worktree.

        Raises:
            WorktreeNotFoundError: if nothing matches
        """
        if worktrees is None:
            worktrees = self.list_worktrees()
        wt = find_worktree(identifier, self.repo_name(worktrees), worktrees)
        if wt is None:
            raise WorktreeNotFoundError(identifier)
        return wt

    def current_worktree(self, cwd: Optional[str] = None) -> Worktree:
        """Worktree containing ``cwd`` (defaults to the process directory).

        Raises:
            NotInWorktreeError: if the directory is outside every worktree
        """
        cwd = cwd or os.getcwd()
        wt = find_current_worktree(cwd, self.list_worktrees())
        if wt is None:
            raise NotInWorktreeError(cwd)
        return wt

    # Add

    def _ensure_branch(self, branch: str) -> None:
        """Make ``branch`` available locally, fetching it from the remote if needed."""
        if self.git_ops.branch_exists(branch):
            return
        if self.git_ops.remote_branch_exists(branch):
            self._console_print(f"[blue]{SYMBOL_INFO} Fetching {branch} from remote...[/blue]")
            self.git_ops.fetch_branch(branch)
            return
        raise BranchNotFoundError(branch)

    def add(
        self,
        branch: Optional[str] = None,
        create_branch: bool = False,
        pr: Optional[str] = None,
        start_point: Optional[str] = None,
        sync_mode: Optional[SyncMode] = None,
    ) -> AddOutcome:
        """Create a worktree for a branch.

        Args:
            branch: Branch to check out; None opens the picker unless ``pr`` is given
            create_branch: Create ``branch`` instead of requiring it to exist
            pr: Pull request number or URL whose head branch should be used
            start_point: Ref the new branch starts from
            sync_mode: Override the config-derived sync mode

        Returns:
            AddOutcome; steps after creation only add warnings

        Raises:
            BranchNotFoundError: if the branch exists neither locally nor on the remote
            HookError: if a pre_add hook fails
            GitOperationError: if the worktree cannot be created
        """
        worktrees = self.list_worktrees()
        main = self.main_worktree(worktrees)
        repo_name = main.name
        repo_root = main.path

        if pr:
            branch = self.branch_source.resolve_pr_to_branch(pr, repo_name)
        elif not branch:
            branch = self.picker.pick_branch(self.git_ops.list_branches())
            if not branch:
                logger.info("Branch selection cancelled")
                return AddOutcome(AddStatus.CANCELLED)

        existing = find_worktree(branch, repo_name, worktrees)
        if existing is not None:
            self._console_print(
                f"[blue]{SYMBOL_INFO} Worktree for '{branch}' already exists at {escape(existing.path)}[/blue]"
            )
            return AddOutcome(AddStatus.EXISTS, branch=branch, path=existing.path)

        create_new = create_branch and not pr
        if not create_new:
            self._ensure_branch(branch)

        path = worktree_path(repo_root, repo_name, branch)

        if self.hooks is not None:
            self.hooks.run("pre_add", path, branch, repo_root)

        self.git_ops.create_worktree(path, branch, create_new, start_point if create_new else None)
        self._console_print(f"[green]{SYMBOL_OK} Created worktree for '{branch}' at {escape(path)}[/green]")
        outcome = AddOutcome(AddStatus.CREATED, branch=branch, path=path)

        if sync_mode is None:
            sync_mode = determine_sync_mode(self.config)
        if sync_mode != SyncMode.NONE and self.syncer is not None:
            try:
                copied = self.syncer.sync(path, branch, repo_root, sync_mode)
                self._console_print(f"[green]{SYMBOL_OK} Synced {copied} files[/green]")
            except SyncError as e:
                self._warn(outcome.warnings, f"Failed to sync files: {e}")

        if self.hooks is not None:
            try:
                self.hooks.run("post_add", path, branch, repo_root)
            except HookError as e:
                self._warn(outcome.warnings, str(e))

        editor = self.config.editor_command
        if editor and self.editor is not None:
            try:
                self.editor.open(editor, path)
                self._console_print(f"[green]{SYMBOL_OK} Opened in {editor}[/green]")
            except EditorError as e:
                self._warn(outcome.warnings, f"Failed to open editor: {e}")

        return outcome

    # Remove

    def delete_branch_safely(self, branch: str, current_branch: str, main_path: str,
                             force: bool, warnings: Optional[list[str]] = None) -> BranchDeletion:
        """Delete ``branch`` unless a safety guard trips.

        Protected and currently checked-out branches are refused even with
        ``force``. Git commands run from ``main_path`` so merge checks are made
        against the main worktree's HEAD.

        Args:
            warnings: Refusals and failures are appended here when given
        """
        warnings = warnings if warnings is not None else []
        try:
            if branch in PROTECTED_BRANCHES:
                raise SafetyRefusal(branch, "protected branch")
            if current_branch and branch == current_branch:
                raise SafetyRefusal(branch, "currently checked out")

            with working_directory(main_path):
                if not self.git_ops.branch_exists(branch):
                    logger.debug(f"Branch {branch} does not exist, nothing to delete")
                    return BranchDeletion.SKIPPED

                if not force and not self.git_ops.is_merged(branch):
                    raise SafetyRefusal(branch, "not fully merged (use --force to delete anyway)")

                try:
                    self.git_ops.delete_branch(branch, force=force)
                except GitOperationError as e:
                    if "not fully merged" in str(e):
                        raise SafetyRefusal(branch, "not fully merged (use --force to delete anyway)") from e
                    self._warn(warnings, f"Failed to delete branch {branch}: {e}")
                    return BranchDeletion.FAILED

            logger.info(f"Deleted branch {branch}")
            return BranchDeletion.DELETED
        except SafetyRefusal as e:
            self._warn(warnings, str(e))
            return BranchDeletion.REFUSED

    def _remove_one(self, identifier: str, worktrees: list[Worktree], repo_name: str,
                    repo_root: str, current_branch: str) -> RemovalOutcome:
        wt = find_worktree(identifier, repo_name, worktrees)
        if wt is None:
            self._console_print(f"[red]{SYMBOL_FAILED} Worktree '{escape(identifier)}' not found[/red]")
            return RemovalOutcome(identifier, RemovalStatus.NOT_FOUND, error=f"Worktree '{identifier}' not found")

        outcome = RemovalOutcome(identifier, RemovalStatus.REMOVED, worktree_path=wt.path, branch=wt.branch)

        if wt.is_main:
            outcome.status = RemovalStatus.SKIPPED_MAIN
            self._warn(outcome.warnings, f"Skipping main worktree at {wt.path}")
            return outcome

        if self.hooks is not None:
            try:
                self.hooks.run("pre_remove", wt.path, wt.branch, repo_root)
            except (HookError, ConfigError) as e:
                outcome.status = RemovalStatus.FAILED
                outcome.error = str(e)
                self._console_print(f"[red]{SYMBOL_FAILED} {escape(str(e))}[/red]")
                return outcome

        try:
            self.git_ops.remove_worktree(wt.path, force=self.config.rm.force)
        except GitOperationError as e:
            outcome.status = RemovalStatus.FAILED
            outcome.error = str(e)
            self._console_print(
                f"[red]{SYMBOL_FAILED} Failed to remove worktree at {escape(wt.path)}: {escape(str(e))}[/red]"
            )
            return outcome
        self._console_print(f"[green]{SYMBOL_OK} Removed worktree at {escape(wt.path)}[/green]")

        if self.hooks is not None:
            try:
                self.hooks.run("post_remove", wt.path, wt.branch, repo_root)
            except (HookError, ConfigError) as e:
                self._warn(outcome.warnings, str(e))

        if self.config.rm.branch and wt.branch:
            outcome.branch_deleted = self.delete_branch_safely(
                wt.branch, current_branch, repo_root, self.config.rm.force, outcome.warnings
            )
            if outcome.branch_deleted == BranchDeletion.DELETED:
                self._console_print(f"[green]{SYMBOL_OK} Deleted branch {wt.branch}[/green]")

        return outcome

    def remove(self, identifiers: Optional[Iterable[str]] = None) -> list[RemovalOutcome]:
        """Remove worktrees one at a time; a failure never stops the batch.

        With no identifiers the picker offers every non-main worktree.
        """
        worktrees = self.list_worktrees()
        main = self.main_worktree(worktrees)
        repo_name = main.name

        identifiers = list(identifiers or [])
        if not identifiers:
            chosen = self.picker.pick_worktrees(worktrees, exclude_main=True, multi=True)
            if not chosen:
                logger.info("Worktree selection cancelled")
                return []
            identifiers = [wt.path for wt in chosen]

        current_branch = ""
        if self.config.rm.branch:
            # Resolved before any mutation so a failure here leaves everything untouched
            current_branch = self.git_ops.current_branch()

        # Run from the main worktree: the caller's directory may be one of the targets
        with working_directory(main.path):
            return [
                self._remove_one(identifier, worktrees, repo_name, main.path, current_branch)
                for identifier in identifiers
            ]
