from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(
        self,
        email: str,
        password_hash: str,
        username: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User | None:
        """Create a new user. Return User or None if creation failed."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by (already normalized) email."""
        ...

    def get_by_username(self, username: str) -> User | None:
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by opaque ID. Return User or None if not found."""
        ...

    def get_by_seq(self, seq: int) -> User | None:
        """Find a user by sequence number. Return User or None if not found."""
        ...

    def list_all(self) -> list[User]:
        """Return every user ordered by sequence number."""
        ...

    def update(self, user_id: str, fields: dict) -> User | None:
        """Atomically set fields on a user. Return the updated User or None."""
        ...

    def delete(self, user_id: str) -> bool:
        """Delete a user record. Return True if a record was removed."""
        ...
