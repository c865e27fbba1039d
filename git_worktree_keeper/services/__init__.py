"""Services for git-worktree-keeper.

Adapters for git, GitHub, file sync, hooks, the editor and the picker.
"""

from .editor_service import EditorService
from .git import GitOperations, WorktreeService
from .github_service import GitHubService
from .hook_service import HookService, HookType
from .picker import TextualPicker
from .sync_service import SyncService

__all__ = [
    "EditorService",
    "GitOperations",
    "WorktreeService",
    "GitHubService",
    "HookService",
    "HookType",
    "TextualPicker",
    "SyncService",
]
