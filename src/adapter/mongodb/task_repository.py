"""MongoDB implementation of TaskRepository."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from logging import getLogger

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import TASKS_COLLECTION_NAME
from adapter.mongodb.sequence_counter import MongoSequenceCounter
from domain.model.task import Task, TaskDraft, TaskPriority, TaskStatus
from port.sequence_counter import SequenceCounter, TASK_SEQUENCE

logger = getLogger(__name__)


class MongoTaskRepository:
    def __init__(self, db: Database, counter: SequenceCounter | None = None):
        self.collection = db[TASKS_COLLECTION_NAME]
        self.counter = counter or MongoSequenceCounter(db)

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for tasks collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('seq', 1)], 'idx_tasks_seq', unique=True)
            create_index_safe(self.collection, [('owner_id', 1), ('seq', 1)], 'idx_tasks_owner_seq')
            return True
        except PyMongoError as e:
            logger.error("Failed to create tasks indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Task:
        """Convert MongoDB document to Task domain model."""
        return Task(
            id=doc['_id'],
            seq=doc['seq'],
            title=doc['title'],
            description=doc.get('description'),
            status=TaskStatus(doc.get('status', TaskStatus.TO_DO.value)),
            priority=TaskPriority(doc.get('priority', TaskPriority.MEDIUM.value)),
            due_date=doc.get('due_date'),
            owner_id=doc['owner_id'],
            owner_seq=doc['owner_seq'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
        )

    @staticmethod
    def _to_document_values(fields: dict) -> dict:
        return {k: v.value if isinstance(v, Enum) else v for k, v in fields.items()}

    # ── write operations ─────────────────────────────────────

    def create(self, draft: TaskDraft, owner_id: str, owner_seq: int) -> Task | None:
        now = datetime.now(timezone.utc)
        doc = {
            '_id': uuid.uuid4().hex,
            'seq': self.counter.next_value(TASK_SEQUENCE),
            'title': draft.title,
            'description': draft.description,
            'status': draft.status.value,
            'priority': draft.priority.value,
            'due_date': draft.due_date,
            'owner_id': owner_id,
            'owner_seq': owner_seq,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("Failed to create task", extra={"ownerId": owner_id, "error": str(e)})
            return None

        logger.info("Task created", extra={"taskId": doc['_id'], "seq": doc['seq'], "ownerId": owner_id})
        return self._to_domain(doc)

    def update(self, task_id: str, fields: dict) -> Task | None:
        """Atomically $set fields and return the updated Task."""
        doc = self.collection.find_one_and_update(
            {'_id': task_id},
            {'$set': {**self._to_document_values(fields), 'updated_at': datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_domain(doc) if doc else None

    def delete(self, task_id: str) -> bool:
        return self.collection.delete_one({'_id': task_id}).deleted_count > 0

    def delete_by_owner(self, owner_id: str) -> int:
        result = self.collection.delete_many({'owner_id': owner_id})
        return result.deleted_count

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, task_id: str) -> Task | None:
        doc = self.collection.find_one({'_id': task_id})
        return self._to_domain(doc) if doc else None

    def get_by_seq(self, seq: int) -> Task | None:
        doc = self.collection.find_one({'seq': seq})
        return self._to_domain(doc) if doc else None

    def find_by_owner(
        self,
        owner_id: str,
        skip: int = 0,
        limit: int | None = None,
    ) -> tuple[list[Task], int]:
        query = {'owner_id': owner_id}
        total = self.collection.count_documents(query)
        cursor = self.collection.find(query).sort('seq', ASCENDING).skip(skip)
        if limit is not None:
            cursor = cursor.limit(limit)
        return [self._to_domain(doc) for doc in cursor], total
