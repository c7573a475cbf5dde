"""In-memory implementation of TaskRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from adapter.fake.sequence_counter import FakeSequenceCounter
from domain.model.task import Task, TaskDraft
from port.sequence_counter import SequenceCounter, TASK_SEQUENCE


class FakeTaskRepository:
    def __init__(self, counter: SequenceCounter | None = None):
        self.store: dict[str, Task] = {}
        self.counter = counter or FakeSequenceCounter()

    # ── write operations ─────────────────────────────────────

    def create(self, draft: TaskDraft, owner_id: str, owner_seq: int) -> Task | None:
        task_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        task = Task(
            id=task_id,
            seq=self.counter.next_value(TASK_SEQUENCE),
            title=draft.title,
            description=draft.description,
            status=draft.status,
            priority=draft.priority,
            due_date=draft.due_date,
            owner_id=owner_id,
            owner_seq=owner_seq,
            created_at=now,
            updated_at=now,
        )
        self.store[task_id] = task
        return replace(task)

    def update(self, task_id: str, fields: dict) -> Task | None:
        task = self.store.get(task_id)
        if not task:
            return None

        updated = replace(task, **fields, updated_at=datetime.now(timezone.utc))
        self.store[task_id] = updated
        return replace(updated)

    def delete(self, task_id: str) -> bool:
        return self.store.pop(task_id, None) is not None

    def delete_by_owner(self, owner_id: str) -> int:
        doomed = [t.id for t in self.store.values() if t.owner_id == owner_id]
        for task_id in doomed:
            del self.store[task_id]
        return len(doomed)

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, task_id: str) -> Task | None:
        task = self.store.get(task_id)
        return replace(task) if task else None

    def get_by_seq(self, seq: int) -> Task | None:
        for task in self.store.values():
            if task.seq == seq:
                return replace(task)
        return None

    def find_by_owner(
        self,
        owner_id: str,
        skip: int = 0,
        limit: int | None = None,
    ) -> tuple[list[Task], int]:
        owned = sorted(
            (t for t in self.store.values() if t.owner_id == owner_id),
            key=lambda t: t.seq,
        )
        end = None if limit is None else skip + limit
        return [replace(t) for t in owned[skip:end]], len(owned)
