"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger

from pymongo import ASCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from adapter.mongodb.sequence_counter import MongoSequenceCounter
from domain.model.user import User
from port.sequence_counter import SequenceCounter, USER_SEQUENCE

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database, counter: SequenceCounter | None = None):
        self.collection = db[USERS_COLLECTION_NAME]
        self.counter = counter or MongoSequenceCounter(db)

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('username', 1)], 'idx_users_username', unique=True)
            create_index_safe(self.collection, [('seq', 1)], 'idx_users_seq', unique=True)
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            seq=doc['seq'],
            username=doc['username'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            password_hash=doc.get('password_hash'),
            first_name=doc.get('first_name'),
            last_name=doc.get('last_name'),
        )

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        email: str,
        password_hash: str,
        username: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User | None:
        """Insert a user. Return None when a unique index rejects it."""
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': uuid.uuid4().hex,
            'seq': self.counter.next_value(USER_SEQUENCE),
            'email': email,
            'username': username,
            'password_hash': password_hash,
            'first_name': first_name,
            'last_name': last_name,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email or username already exists", extra={"email": email})
            return None

        logger.info("User created", extra={"userId": user_doc['_id'], "seq": user_doc['seq']})
        return self._to_domain(user_doc)

    def update(self, user_id: str, fields: dict) -> User | None:
        """Atomically $set fields and return the updated User."""
        doc = self.collection.find_one_and_update(
            {'_id': user_id},
            {'$set': {**fields, 'updated_at': datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        logger.debug("User updated", extra={"userId": user_id, "fields": sorted(fields)})
        return self._to_domain(doc)

    def delete(self, user_id: str) -> bool:
        result = self.collection.delete_one({'_id': user_id})
        return result.deleted_count > 0

    # ── read operations ──────────────────────────────────────

    def _find_one(self, query: dict) -> User | None:
        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error("Failed to read user", extra={"query": list(query), "error": str(e)})
            raise
        return self._to_domain(doc) if doc else None

    def get_by_email(self, email: str) -> User | None:
        return self._find_one({'email': email})

    def get_by_username(self, username: str) -> User | None:
        return self._find_one({'username': username})

    def get_by_id(self, user_id: str) -> User | None:
        return self._find_one({'_id': user_id})

    def get_by_seq(self, seq: int) -> User | None:
        return self._find_one({'seq': seq})

    def list_all(self) -> list[User]:
        return [self._to_domain(doc) for doc in self.collection.find({}).sort('seq', ASCENDING)]
