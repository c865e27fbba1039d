"""Launches the user's editor on a worktree."""

import shlex
import shutil
import subprocess

from git_worktree_keeper.exceptions import EditorError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class EditorService:
    def open(self, editor: str, worktree_path: str) -> None:
        """Spawn ``editor`` on ``worktree_path`` without waiting for it to exit.

        Raises:
            EditorError: if the command is empty, not on PATH, or fails to start
        """
        try:
            parts = shlex.split(editor)
        except ValueError as e:
            raise EditorError(editor, f"invalid editor command: {e}") from e
        if not parts:
            raise EditorError(editor, "no editor configured")

        if shutil.which(parts[0]) is None:
            raise EditorError(editor, f"editor '{parts[0]}' not found in PATH")

        logger.debug(f"Launching editor: {parts} {worktree_path}")
        try:
            subprocess.Popen(
                [*parts, worktree_path],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise EditorError(editor, str(e)) from e
