"""Port definition for TaskRepository."""

from typing import Protocol

from domain.model.task import Task, TaskDraft


class TaskRepository(Protocol):
    def create(self, draft: TaskDraft, owner_id: str, owner_seq: int) -> Task | None: ...

    def get_by_id(self, task_id: str) -> Task | None: ...

    def get_by_seq(self, seq: int) -> Task | None: ...

    def find_by_owner(
        self,
        owner_id: str,
        skip: int = 0,
        limit: int | None = None,
    ) -> tuple[list[Task], int]: ...

    def update(self, task_id: str, fields: dict) -> Task | None: ...

    def delete(self, task_id: str) -> bool: ...

    def delete_by_owner(self, owner_id: str) -> int: ...
