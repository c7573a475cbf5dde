"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from adapter.fake.sequence_counter import FakeSequenceCounter
from domain.model.user import User
from port.sequence_counter import SequenceCounter, USER_SEQUENCE


class FakeUserRepository:
    def __init__(self, counter: SequenceCounter | None = None):
        self.store: dict[str, User] = {}
        self.counter = counter or FakeSequenceCounter()

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        email: str,
        password_hash: str,
        username: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User | None:
        if any(u.email == email or u.username == username for u in self.store.values()):
            return None

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            seq=self.counter.next_value(USER_SEQUENCE),
            username=username,
            email=email,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self.store[user_id] = user
        return replace(user)

    def update(self, user_id: str, fields: dict) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        updated = replace(user, **fields, updated_at=datetime.now(timezone.utc))
        self.store[user_id] = updated
        return replace(updated)

    def delete(self, user_id: str) -> bool:
        return self.store.pop(user_id, None) is not None

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_username(self, username: str) -> User | None:
        for user in self.store.values():
            if user.username == username:
                return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def get_by_seq(self, seq: int) -> User | None:
        for user in self.store.values():
            if user.seq == seq:
                return replace(user)
        return None

    def list_all(self) -> list[User]:
        return [replace(u) for u in sorted(self.store.values(), key=lambda u: u.seq)]
