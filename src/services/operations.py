"""Domain operations: the one contract both transports call into.

The REST routes and the GraphQL resolvers hold no business rules: each of
them builds a RequestContext from the incoming request and calls exactly one
DomainOperations method. Authentication, ownership and validation all
happen here or below, so the two APIs cannot drift apart.
"""

import logging
from dataclasses import dataclass

from domain.model.task import Task, TaskDraft, TaskPage, TaskPatch
from domain.model.user import User, UserChanges
from port.task_repository import TaskRepository
from port.token_issuer import TokenIssuer
from port.user_repository import UserRepository
from services import task_service, user_service
from services.guard import require_authenticated, require_self, require_task_owner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Per-request caller information. ``token`` is the raw bearer token."""
    token: str | None = None


@dataclass(frozen=True)
class Session:
    token: str
    user: User


class DomainOperations:
    """Transport-independent verbs over users and tasks.

    Ids are accepted in either native form: ``int`` is a sequence number
    (REST), ``str`` is an opaque id (GraphQL).
    """

    def __init__(self, users: UserRepository, tasks: TaskRepository, tokens: TokenIssuer):
        self.users = users
        self.tasks = tasks
        self.tokens = tokens

    def _caller(self, context: RequestContext) -> User:
        return require_authenticated(self.users, self.tokens, context.token)

    # ── sessions ─────────────────────────────────────────────

    def create_user(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        return user_service.register(self.users, email, password, first_name, last_name)

    def login(self, email: str, password: str) -> Session:
        user = user_service.authenticate(self.users, email, password)
        logger.info("User logged in", extra={"userId": user.id})
        return Session(token=self.tokens.issue(user.id), user=user)

    def logout(self, context: RequestContext) -> bool:
        """Confirm the caller is authenticated. The client discards the token."""
        user = self._caller(context)
        logger.info("User logged out", extra={"userId": user.id})
        return True

    def me(self, context: RequestContext) -> User:
        return self._caller(context)

    # ── users ────────────────────────────────────────────────

    def list_users(self, context: RequestContext) -> list[User]:
        self._caller(context)
        return self.users.list_all()

    def get_user(self, ref: str | int, context: RequestContext) -> User:
        caller = self._caller(context)
        target = user_service.find_user(self.users, ref)
        require_self(caller, target)
        return target

    def update_user(self, ref: str | int, changes: UserChanges, context: RequestContext) -> User:
        caller = self._caller(context)
        target = user_service.find_user(self.users, ref)
        require_self(caller, target)
        return user_service.update_user(self.users, target, changes)

    def delete_user(self, ref: str | int, context: RequestContext) -> bool:
        caller = self._caller(context)
        target = user_service.find_user(self.users, ref)
        require_self(caller, target)
        return user_service.delete_user(self.users, self.tasks, target)

    # ── tasks ────────────────────────────────────────────────

    def create_task(self, draft: TaskDraft, context: RequestContext) -> Task:
        owner = self._caller(context)
        return task_service.create_task(self.tasks, owner, draft)

    def list_tasks(
        self,
        context: RequestContext,
        page: int = 1,
        limit: int = task_service.DEFAULT_PAGE_SIZE,
    ) -> TaskPage:
        owner = self._caller(context)
        return task_service.list_tasks(self.tasks, owner, page, limit)

    def list_tasks_of(self, user: User, context: RequestContext) -> list[Task]:
        """Tasks of ``user`` as visible to the caller: only their own."""
        caller = self._caller(context)
        if caller.id != user.id:
            return []
        tasks, _ = self.tasks.find_by_owner(caller.id)
        return tasks

    def owner_of(self, task: Task, context: RequestContext) -> User:
        """Owner of a task the caller already fetched; only the caller owns visible tasks."""
        caller = self._caller(context)
        require_task_owner(caller, task)
        return caller

    def get_task(self, ref: str | int, context: RequestContext) -> Task:
        caller = self._caller(context)
        return require_task_owner(caller, task_service.find_task(self.tasks, ref))

    def update_task(self, ref: str | int, patch: TaskPatch, context: RequestContext) -> Task:
        caller = self._caller(context)
        task = require_task_owner(caller, task_service.find_task(self.tasks, ref))
        return task_service.update_task(self.tasks, task, patch)

    def delete_task(self, ref: str | int, context: RequestContext) -> bool:
        caller = self._caller(context)
        task = require_task_owner(caller, task_service.find_task(self.tasks, ref))
        return task_service.delete_task(self.tasks, task)
