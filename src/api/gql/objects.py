"""GraphQL object, enum and input types.

Object types wrap the domain entity (kept as a private field) so nested
resolvers such as User.tasks and Task.user can go back through
DomainOperations with the caller's context.
"""

from enum import Enum
from typing import Optional

import strawberry
from strawberry.types import Info

from api.gql.context import domain_errors, operations, request_context
from api.gql.scalars import DateTime
from domain.model.task import Task, TaskDraft, TaskPatch, TaskPriority, TaskStatus
from domain.model.user import User, UserChanges


@strawberry.enum(name="TaskStatus")
class TaskStatusEnum(Enum):
    TO_DO = TaskStatus.TO_DO.value
    IN_PROGRESS = TaskStatus.IN_PROGRESS.value
    DONE = TaskStatus.DONE.value


@strawberry.enum(name="TaskPriority")
class TaskPriorityEnum(Enum):
    LOW = TaskPriority.LOW.value
    MEDIUM = TaskPriority.MEDIUM.value
    HIGH = TaskPriority.HIGH.value


# ── object types ─────────────────────────────────────────────


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    username: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    created_at: DateTime
    updated_at: DateTime
    entity: strawberry.Private[User]

    @strawberry.field(description="Tasks of this user visible to the caller")
    def tasks(self, info: Info) -> list["TaskType"]:
        with domain_errors():
            tasks = operations(info).list_tasks_of(self.entity, request_context(info))
            return [TaskType.from_domain(t) for t in tasks]

    @classmethod
    def from_domain(cls, user: User) -> "UserType":
        return cls(
            id=strawberry.ID(user.id),
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            created_at=user.created_at,
            updated_at=user.updated_at,
            entity=user,
        )


@strawberry.type(name="Task")
class TaskType:
    id: strawberry.ID
    title: str
    description: Optional[str]
    status: TaskStatusEnum
    priority: TaskPriorityEnum
    due_date: Optional[DateTime]
    user_id: strawberry.ID
    created_at: DateTime
    updated_at: DateTime
    entity: strawberry.Private[Task]

    @strawberry.field
    def user(self, info: Info) -> UserType:
        with domain_errors():
            owner = operations(info).owner_of(self.entity, request_context(info))
            return UserType.from_domain(owner)

    @classmethod
    def from_domain(cls, task: Task) -> "TaskType":
        return cls(
            id=strawberry.ID(task.id),
            title=task.title,
            description=task.description,
            status=TaskStatusEnum(task.status.value),
            priority=TaskPriorityEnum(task.priority.value),
            due_date=task.due_date,
            user_id=strawberry.ID(task.owner_id),
            created_at=task.created_at,
            updated_at=task.updated_at,
            entity=task,
        )


@strawberry.type
class AuthPayload:
    token: str
    user: UserType


# ── inputs ───────────────────────────────────────────────────


@strawberry.input
class CreateUserInput:
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


@strawberry.input
class UpdateUserInput:
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def to_changes(self) -> UserChanges:
        return UserChanges(
            password=self.password,
            first_name=self.first_name,
            last_name=self.last_name,
        )


@strawberry.input
class LoginInput:
    email: str
    password: str


@strawberry.input
class CreateTaskInput:
    title: str
    description: Optional[str] = None
    status: TaskStatusEnum = TaskStatusEnum.TO_DO
    priority: TaskPriorityEnum = TaskPriorityEnum.MEDIUM
    due_date: Optional[DateTime] = None

    def to_draft(self) -> TaskDraft:
        return TaskDraft(
            title=self.title,
            description=self.description,
            status=TaskStatus(self.status.value),
            priority=TaskPriority(self.priority.value),
            due_date=self.due_date,
        )


@strawberry.input
class UpdateTaskInput:
    """Omitted fields are left unchanged; an explicit null clears optional ones."""
    title: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    status: Optional[TaskStatusEnum] = strawberry.UNSET
    priority: Optional[TaskPriorityEnum] = strawberry.UNSET
    due_date: Optional[DateTime] = strawberry.UNSET

    def to_patch(self) -> TaskPatch:
        changes = {}
        for name in ("title", "description", "status", "priority", "due_date"):
            value = getattr(self, name)
            if value is strawberry.UNSET:
                continue
            if isinstance(value, Enum):
                value = value.value
            changes[name] = value
        return TaskPatch.from_changes(changes)
