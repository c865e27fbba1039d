"""Result models for worktree lifecycle operations"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class AddStatus(Enum):
    """Outcome of an add request."""
    CREATED = "created"
    EXISTS = "exists"
    CANCELLED = "cancelled"


class RemovalStatus(Enum):
    """Outcome of removing a single worktree."""
    REMOVED = "removed"
    SKIPPED_MAIN = "skipped-main"
    NOT_FOUND = "not-found"
    FAILED = "failed"


class BranchDeletion(Enum):
    """What happened to the branch of a removed worktree."""
    NOT_REQUESTED = "not-requested"
    DELETED = "deleted"
    SKIPPED = "skipped"  # Branch did not exist
    REFUSED = "refused"  # A safety guard tripped
    FAILED = "failed"  # git rejected the delete call


@dataclass
class AddOutcome:
    """Result of creating (or not creating) a worktree."""
    status: AddStatus
    branch: str = ""
    path: str = ""
    warnings: list[str] = field(default_factory=list)


@dataclass
class RemovalOutcome:
    """Result of one target in a removal batch."""
    identifier: str
    status: RemovalStatus
    worktree_path: str = ""
    branch: str = ""
    branch_deleted: BranchDeletion = BranchDeletion.NOT_REQUESTED
    error: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def removed(self) -> bool:
        return self.status == RemovalStatus.REMOVED

    @property
    def failed(self) -> bool:
        return self.status in (RemovalStatus.NOT_FOUND, RemovalStatus.FAILED)
