"""Task service: create, list and change tasks on behalf of their owner.

Ownership is checked by the caller (services.guard); these functions only
enforce the task rules themselves.
"""

import logging

from domain.model.errors import InternalError, NotFoundError, ValidationError
from domain.model.task import Task, TaskDraft, TaskPage, TaskPatch, TaskPriority, TaskStatus
from domain.model.user import User
from port.sequence_counter import MAX_SEQUENCE_VALUE, in_sequence_range
from port.task_repository import TaskRepository
from services.guard import TASK_NOT_FOUND

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _clean_title(title: str | None) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")
    return title


def _clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    return description.strip() or None


def _coerce_enum(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field}: expected one of {allowed}")


def create_task(repo: TaskRepository, owner: User, draft: TaskDraft) -> Task:
    """Create a task owned by ``owner``.

    Raises:
        ValidationError: blank title or unknown status/priority
        InternalError: the store failed
    """
    clean = TaskDraft(
        title=_clean_title(draft.title),
        description=_clean_description(draft.description),
        status=_coerce_enum(TaskStatus, draft.status, "status"),
        priority=_coerce_enum(TaskPriority, draft.priority, "priority"),
        due_date=draft.due_date,
    )
    task = repo.create(clean, owner_id=owner.id, owner_seq=owner.seq)
    if not task:
        raise InternalError("Failed to create task")
    return task


def list_tasks(
    repo: TaskRepository,
    owner: User,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> TaskPage:
    """Return one page of the owner's tasks, oldest first.

    Raises:
        ValidationError: page < 1 or limit outside 1..MAX_PAGE_SIZE, or a page past the last storable offset
    """
    if page < 1:
        raise ValidationError("Page must be at least 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    if (page - 1) * limit > MAX_SEQUENCE_VALUE:
        raise ValidationError("Page is out of range")

    tasks, total = repo.find_by_owner(owner.id, skip=(page - 1) * limit, limit=limit)
    return TaskPage(tasks=tasks, total=total, page=page, limit=limit)


def find_task(repo: TaskRepository, ref: str | int) -> Task | None:
    """Look up a task by its native id: int sequence or opaque string."""
    if isinstance(ref, int):
        return repo.get_by_seq(ref) if in_sequence_range(ref) else None
    return repo.get_by_id(str(ref))


def update_task(repo: TaskRepository, task: Task, patch: TaskPatch) -> Task:
    """Apply the provided fields of ``patch`` to ``task``.

    Status transitions are unrestricted.

    Raises:
        ValidationError: blank title or unknown status/priority
        NotFoundError: task vanished during the update
    """
    changes = patch.provided()
    fields = {}
    if "title" in changes:
        fields["title"] = _clean_title(changes["title"])
    if "description" in changes:
        fields["description"] = _clean_description(changes["description"])
    if "status" in changes:
        fields["status"] = _coerce_enum(TaskStatus, changes["status"], "status")
    if "priority" in changes:
        fields["priority"] = _coerce_enum(TaskPriority, changes["priority"], "priority")
    if "due_date" in changes:
        fields["due_date"] = changes["due_date"]

    if not fields:
        return task

    updated = repo.update(task.id, fields)
    if not updated:
        raise NotFoundError(TASK_NOT_FOUND)

    logger.info("Task updated", extra={"taskId": task.id, "fields": sorted(fields)})
    return updated


def delete_task(repo: TaskRepository, task: Task) -> bool:
    if not repo.delete(task.id):
        raise NotFoundError(TASK_NOT_FOUND)
    logger.info("Task deleted", extra={"taskId": task.id, "ownerId": task.owner_id})
    return True
