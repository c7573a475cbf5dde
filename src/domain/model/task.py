# domain/model/task.py

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum


class TaskStatus(str, Enum):
    """Task progress. Any value may follow any other."""
    TO_DO = 'to-do'
    IN_PROGRESS = 'in-progress'
    DONE = 'done'


class TaskPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


# ── Value Objects ────────────────────────────────────────


@dataclass(frozen=True)
class TaskDraft:
    """Input for creating a task. Title is validated by the service."""
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TO_DO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None


_UNSET = object()


@dataclass(frozen=True)
class TaskPatch:
    """Partial update of a task.

    Fields left at the sentinel are not touched, so a caller can clear
    ``description`` or ``due_date`` by passing ``None`` explicitly.
    """
    title: object = _UNSET
    description: object = _UNSET
    status: object = _UNSET
    priority: object = _UNSET
    due_date: object = _UNSET

    @classmethod
    def from_changes(cls, changes: dict) -> 'TaskPatch':
        """Build a patch from a dict holding only the provided fields."""
        known = {f.name for f in fields(cls)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown task fields: {sorted(unknown)}")
        return cls(**changes)

    def provided(self) -> dict:
        """Return the fields that were explicitly set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not _UNSET
        }


# ── Task Domain Model ────────────────────────────────────


@dataclass
class Task:
    """Domain model representing a unit of work owned by one user.

    ``owner_seq`` mirrors the owner's sequence number so the REST
    representation does not need a second lookup. Tasks never change owner.
    """
    id: str
    seq: int
    title: str
    owner_id: str
    owner_seq: int
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    status: TaskStatus = TaskStatus.TO_DO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id


@dataclass
class TaskPage:
    """One page of the caller's tasks plus the total count."""
    tasks: list[Task]
    total: int
    page: int
    limit: int
