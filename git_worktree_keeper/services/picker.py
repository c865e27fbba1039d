"""Picker adapter backed by the textual UI."""

from typing import Sequence

from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.ui.picker import PickerApp

logger = get_logger(__name__)


def worktree_label(worktree: Worktree) -> str:
    """Display label for a worktree: directory name plus a main marker."""
    label = worktree.name
    if worktree.branch and worktree.branch != label:
        label += f" [{worktree.branch}]"
    if worktree.is_main:
        label += " (main)"
    return label


class TextualPicker:
    """Runs a full-screen picker for branch and worktree choices."""

    def _run(self, title: str, labels: list[str], multi: bool) -> list[int]:
        if not labels:
            logger.debug(f"Nothing to pick for: {title}")
            return []
        result = PickerApp(title, labels, multi=multi).run()
        return result or []

    def pick_branch(self, candidates: Sequence[str]) -> str:
        """Return the chosen branch, or "" if the user cancelled."""
        candidates = list(candidates)
        chosen = self._run("Select a branch (enter to pick, esc to cancel)", candidates, multi=False)
        return candidates[chosen[0]] if chosen else ""

    def pick_worktrees(self, worktrees: Sequence[Worktree], exclude_main: bool = False,
                       multi: bool = False) -> list[Worktree]:
        """Return the chosen worktrees, or [] if the user cancelled."""
        choices = [wt for wt in worktrees if not (exclude_main and wt.is_main)]
        if multi:
            title = "Select worktrees (space to toggle, d when done, esc to cancel)"
        else:
            title = "Select a worktree (enter to pick, esc to cancel)"
        chosen = self._run(title, [worktree_label(wt) for wt in choices], multi=multi)
        return [choices[i] for i in chosen]
