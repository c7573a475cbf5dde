from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a user.

    ``id`` is the opaque identifier, ``seq`` the integer sequence number.
    Both are assigned by the repository at creation and never change.
    """
    id: str
    seq: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime
    password_hash: str | None = None
    first_name: str | None = None
    last_name: str | None = None


@dataclass(frozen=True)
class UserChanges:
    """Self-service profile changes. ``None`` means leave unchanged."""
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
