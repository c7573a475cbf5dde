"""Pydantic models for REST request/response bodies.

REST exposes each entity's integer sequence number as ``id``; the GraphQL
schema exposes the opaque id instead. Timestamps use the shared wire format.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from api.serialization import format_timestamp
from domain.model.task import Task, TaskPriority, TaskStatus
from domain.model.user import User
from services.task_service import DEFAULT_PAGE_SIZE


class _TimestampedResponse(BaseModel):
    created_at: datetime
    updated_at: datetime

    @field_serializer('created_at', 'updated_at')
    def _serialize_timestamps(self, value: datetime) -> str:
        return format_timestamp(value)


# ── users ────────────────────────────────────────────────────


class CreateUserRequest(BaseModel):
    """Request model for user registration."""
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UpdateUserRequest(BaseModel):
    """Request model for self-service profile changes."""
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserResponse(_TimestampedResponse):
    """Response model for user. Never carries the password hash."""
    id: int = Field(..., description="User sequence number")
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


def to_user_response(user: User) -> UserResponse:
    """Convert domain User to API UserResponse."""
    return UserResponse(
        id=user.seq,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


# ── sessions ─────────────────────────────────────────────────


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: str
    password: str


class SessionResponse(BaseModel):
    """Response model for a successful login."""
    token: str
    user: UserResponse


# ── tasks ────────────────────────────────────────────────────


class CreateTaskRequest(BaseModel):
    """Request model for creating a task."""
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TO_DO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None


class UpdateTaskRequest(BaseModel):
    """Request model for a partial task update. Omitted fields are unchanged."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None


class TaskResponse(_TimestampedResponse):
    """Response model for task."""
    id: int = Field(..., description="Task sequence number")
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    user_id: int = Field(..., description="Owner's sequence number")

    @field_serializer('due_date')
    def _serialize_due_date(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value) if value else None


def to_task_response(task: Task) -> TaskResponse:
    """Convert domain Task to API TaskResponse."""
    return TaskResponse(
        id=task.seq,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        user_id=task.owner_seq,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


class TaskListResponse(BaseModel):
    """Response model for the caller's tasks with pagination."""
    page: int = Field(1, description="Page number, starting at 1")
    limit: int = Field(DEFAULT_PAGE_SIZE, description="Maximum number of tasks per page")
    total: int = Field(..., description="Total number of tasks owned by the caller")
    tasks: list[TaskResponse]
