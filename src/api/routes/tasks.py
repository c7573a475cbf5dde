"""Task routes. Every task route is scoped to the caller's own tasks.

A task that exists but belongs to someone else answers 404, exactly like a
task that does not exist.
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_operations
from api.models import (
    CreateTaskRequest,
    TaskListResponse,
    TaskResponse,
    UpdateTaskRequest,
    to_task_response,
)
from api.security import get_request_context
from domain.model.task import TaskDraft, TaskPatch
from services.operations import DomainOperations, RequestContext
from services.task_service import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
def list_tasks(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    """List the caller's tasks, oldest first."""
    result = ops.list_tasks(ctx, page=page, limit=limit)
    return TaskListResponse(
        page=result.page,
        limit=result.limit,
        total=result.total,
        tasks=[to_task_response(t) for t in result.tasks],
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    return to_task_response(ops.get_task(task_id, ctx))


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    request: CreateTaskRequest,
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    draft = TaskDraft(
        title=request.title,
        description=request.description,
        status=request.status,
        priority=request.priority,
        due_date=request.due_date,
    )
    task = ops.create_task(draft, ctx)
    return to_task_response(task)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    request: UpdateTaskRequest,
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    """Apply only the fields present in the request body."""
    patch = TaskPatch.from_changes(request.model_dump(exclude_unset=True))
    return to_task_response(ops.update_task(task_id, patch, ctx))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    ops.delete_task(task_id, ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
