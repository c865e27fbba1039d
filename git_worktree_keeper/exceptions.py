"""Custom exceptions for git-worktree-keeper"""

from typing import Iterable, Optional


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""

    hint: Optional[str] = None


class ParseError(WorktreeKeeperError):
    """Exception raised when the worktree listing is fundamentally malformed."""

    def __init__(self, line_number: int, line: str, message: str):
        self.line_number = line_number
        self.line = line
        super().__init__(f"Malformed worktree listing at line {line_number} ({line!r}): {message}")


class CommandExecutionError(WorktreeKeeperError):
    """Exception raised when an external command exits unsuccessfully."""

    def __init__(self, command: str, message: Optional[str] = None, status=None):
        self.command = command
        self.message = message
        self.status = status

        error_msg = f"Command '{command}' failed"
        if status is not None:
            error_msg += f" (exit {status})"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitOperationError(CommandExecutionError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, branch: Optional[str] = None, message: Optional[str] = None,
                 status=None):
        self.operation = operation
        self.branch = branch
        self.message = message
        self.status = status
        self.command = f"git {operation}"

        error_msg = f"Git operation '{operation}' failed"
        if branch:
            error_msg += f" for branch '{branch}'"
        if message:
            error_msg += f": {message}"

        WorktreeKeeperError.__init__(self, error_msg)


class GitHubAPIError(CommandExecutionError):
    """Exception raised for errors in GitHub API operations."""

    hint = "Check your GitHub token or PR identifier"

    def __init__(self, operation: str, message: Optional[str] = None, status=None):
        self.operation = operation
        self.message = message
        self.status = status
        self.command = f"GitHub {operation}"

        error_msg = f"GitHub API operation '{operation}' failed"
        if status:
            error_msg += f" (status {status})"
        if message:
            error_msg += f": {message}"

        WorktreeKeeperError.__init__(self, error_msg)


class HookError(CommandExecutionError):
    """Exception raised when a project hook fails."""

    def __init__(self, hook_type: str, index: int, command: str, message: Optional[str] = None,
                 status=None):
        self.hook_type = hook_type
        self.index = index
        super().__init__(command, message, status)

    def __str__(self) -> str:
        return f"{self.hook_type} hook {self.index + 1} failed: {super().__str__()}"


class EditorError(CommandExecutionError):
    """Exception raised when the editor cannot be launched."""


class SyncError(CommandExecutionError):
    """Exception raised when files cannot be synced into a new worktree."""


class BranchNotFoundError(WorktreeKeeperError):
    """Exception raised when a branch exists neither locally nor on the remote."""

    hint = "Use -b to create a new branch"

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Branch '{branch}' not found locally or on origin")


class WorktreeNotFoundError(WorktreeKeeperError):
    """Exception raised when an identifier resolves to no worktree."""

    hint = "Use 'gw ls' to list available worktrees"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Worktree '{identifier}' not found")


class ConflictingFlagsError(WorktreeKeeperError):
    """Exception raised when a flag and its negation are both supplied."""

    def __init__(self, conflicts: Iterable[tuple[str, str]]):
        self.conflicts = list(conflicts)
        pairs = ", ".join(f"{flag} and {negation}" for flag, negation in self.conflicts)
        super().__init__(f"Cannot use {pairs} together")


class SafetyRefusal(WorktreeKeeperError):
    """Raised when a branch deletion guard trips."""

    def __init__(self, branch: str, reason: str):
        self.branch = branch
        self.reason = reason
        super().__init__(f"Refusing to delete branch '{branch}': {reason}")


class InvalidInputError(WorktreeKeeperError):
    """Exception raised for invalid user input."""

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid input {value!r}: {reason}")


class NotInWorktreeError(WorktreeKeeperError):
    """Exception raised when the current directory belongs to no worktree."""

    hint = "The current directory is not within a git worktree"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not inside a worktree: {path}")


class ConfigError(WorktreeKeeperError):
    """Exception raised when the persisted configuration cannot be loaded."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Invalid configuration in {path}: {message}")
