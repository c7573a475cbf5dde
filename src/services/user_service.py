"""User service: registration, credentials and self-service account logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that transport adapters map to their own error shapes.
"""

import logging
import os
from functools import lru_cache

import bcrypt

from domain.model.errors import (
    DuplicateError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from domain.model.user import User, UserChanges
from port.sequence_counter import in_sequence_range
from port.task_repository import TaskRepository
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
MIN_PASSWORD_LENGTH = 6
# bcrypt only accepts inputs up to 72 bytes
MAX_PASSWORD_BYTES = 72

INVALID_CREDENTIALS = "Invalid email or password"
USER_NOT_FOUND = "User not found"


# ── credentials ──────────────────────────────────────────────


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    """Check a password. Over-long input never matches but still costs one hash comparison."""
    encoded = plain.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        bcrypt.checkpw(encoded[:MAX_PASSWORD_BYTES], hashed.encode("utf-8"))
        return False
    return bcrypt.checkpw(encoded, hashed.encode("utf-8"))


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash compared against when the email is unknown, so both paths cost the same."""
    return _hash_password("not-a-real-password")


def _validate_password(password: str | None) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


# ── input cleanup ────────────────────────────────────────────


def normalize_email(email: str | None) -> str:
    """Trim and case-fold an email. Uniqueness is checked on this form."""
    return (email or "").strip().lower()


def _validate_email(email: str) -> None:
    if not email:
        raise ValidationError("Email is required")
    local, _, domain = email.partition("@")
    if not local or not domain:
        raise ValidationError("Email must be a valid address")


def _clean_name(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ── operations ───────────────────────────────────────────────


def register(
    repo: UserRepository,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    """Register a new user. The username is the normalized email.

    Raises:
        ValidationError: empty/malformed email or short password
        DuplicateError: email (case-insensitively) already registered
        InternalError: the store failed for another reason
    """
    email = normalize_email(email)
    _validate_email(email)
    _validate_password(password)

    username = email
    if repo.get_by_email(email) or repo.get_by_username(username):
        raise DuplicateError("Email already registered")

    user = repo.create(
        email=email,
        password_hash=_hash_password(password),
        username=username,
        first_name=_clean_name(first_name),
        last_name=_clean_name(last_name),
    )
    if not user:
        # a concurrent registration may have won the unique index
        if repo.get_by_email(email):
            raise DuplicateError("Email already registered")
        raise InternalError("Failed to create user")

    logger.info("User registered", extra={"userId": user.id, "seq": user.seq})
    return user


def authenticate(repo: UserRepository, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password raise the same error.

    Raises:
        InvalidCredentialsError: invalid credentials (deliberately vague)
    """
    user = repo.get_by_email(normalize_email(email))
    if not user or not user.password_hash:
        _verify_password(password or "", _dummy_hash())
        raise InvalidCredentialsError(INVALID_CREDENTIALS)

    if not _verify_password(password or "", user.password_hash):
        raise InvalidCredentialsError(INVALID_CREDENTIALS)

    return user


def find_user(repo: UserRepository, ref: str | int) -> User:
    """Look up a user by its native id: int sequence or opaque string.

    Raises:
        NotFoundError: no such user
    """
    if isinstance(ref, int):
        user = repo.get_by_seq(ref) if in_sequence_range(ref) else None
    else:
        user = repo.get_by_id(str(ref))
    if not user:
        raise NotFoundError(USER_NOT_FOUND)
    return user


def update_user(repo: UserRepository, target: User, changes: UserChanges) -> User:
    """Apply self-service changes to ``target``.

    Raises:
        ValidationError: new password too short
        NotFoundError: user vanished during the update
    """
    fields = {}
    if changes.password is not None:
        _validate_password(changes.password)
        fields["password_hash"] = _hash_password(changes.password)
    if changes.first_name is not None:
        fields["first_name"] = _clean_name(changes.first_name)
    if changes.last_name is not None:
        fields["last_name"] = _clean_name(changes.last_name)

    if not fields:
        return target

    updated = repo.update(target.id, fields)
    if not updated:
        raise NotFoundError(USER_NOT_FOUND)

    logger.info("User updated", extra={"userId": target.id, "passwordChanged": "password_hash" in fields})
    return updated


def delete_user(users: UserRepository, tasks: TaskRepository, target: User) -> bool:
    """Delete ``target`` and every task it owns.

    Tasks go first so no task ever points at a missing owner; a second sweep
    removes anything created while the user record was being deleted.
    """
    removed = tasks.delete_by_owner(target.id)
    if not users.delete(target.id):
        raise NotFoundError(USER_NOT_FOUND)
    removed += tasks.delete_by_owner(target.id)

    logger.info("User deleted", extra={"userId": target.id, "tasksRemoved": removed})
    return True
