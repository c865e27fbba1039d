"""Working-directory helpers."""

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@contextmanager
def working_directory(path: str) -> Iterator[Optional[str]]:
    """Temporarily change the process working directory to ``path``.

    The previous directory is restored on every exit path, including errors.
    If the previous directory no longer exists (it was a removed worktree),
    the change still happens and nothing is restored.

    Yields:
        The directory that was current before the change, or None if it was gone
    """
    try:
        previous = os.getcwd()
    except FileNotFoundError:
        logger.debug("Current directory no longer exists, it will not be restored")
        previous = None

    os.chdir(path)
    logger.debug(f"Changed directory to {path}")
    try:
        yield previous
    finally:
        if previous is not None:
            try:
                os.chdir(previous)
            except OSError as e:
                # Removed by the work done inside the block
                logger.debug(f"Could not return to {previous}: {e}")
