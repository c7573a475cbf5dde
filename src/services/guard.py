"""Authorization guard: who is calling, and may they touch this entity.

Every check raises a domain error; transports never see which internal
sub-case (missing token, bad signature, expired, deleted subject) failed.
"""

import logging

from domain.model.errors import NotFoundError, PermissionDeniedError, UnauthenticatedError
from domain.model.task import Task
from domain.model.user import User
from port.token_issuer import TokenIssuer
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

AUTHENTICATION_REQUIRED = "Authentication required"
TASK_NOT_FOUND = "Task not found"


def require_authenticated(users: UserRepository, tokens: TokenIssuer, token: str | None) -> User:
    """Resolve a bearer token to a live User or raise UnauthenticatedError."""
    if not token:
        raise UnauthenticatedError(AUTHENTICATION_REQUIRED)

    user_id = tokens.verify(token)
    if not user_id:
        raise UnauthenticatedError(AUTHENTICATION_REQUIRED)

    user = users.get_by_id(user_id)
    if not user:
        # outstanding tokens of a deleted user are inert
        logger.info("Token subject no longer exists", extra={"userId": user_id})
        raise UnauthenticatedError(AUTHENTICATION_REQUIRED)

    return user


def require_self(caller: User, target: User) -> None:
    """Users may only read, update or delete their own record."""
    if caller.id != target.id:
        logger.info("Cross-user access denied", extra={"userId": caller.id, "targetId": target.id})
        raise PermissionDeniedError("Not authorized to access this user")


def require_task_owner(caller: User, task: Task | None) -> Task:
    """Return the task if the caller owns it.

    A missing task and someone else's task raise the same NotFoundError.
    """
    if task is None or not task.is_owned_by(caller.id):
        raise NotFoundError(TASK_NOT_FOUND)
    return task
