"""User routes.

- POST /users: Register (no authentication)
- GET /users: User directory
- GET /users/me: Current user
- GET|PATCH|DELETE /users/{id}: Own record only
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_operations
from api.models import (
    CreateUserRequest,
    UpdateUserRequest,
    UserResponse,
    to_user_response,
)
from api.security import get_request_context
from domain.model.user import UserChanges
from services.operations import DomainOperations, RequestContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    request: CreateUserRequest,
    ops: DomainOperations = Depends(get_operations),
):
    """Register a new user. The username is derived from the email."""
    user = ops.create_user(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return to_user_response(user)


@router.get("", response_model=list[UserResponse])
def list_users(
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    return [to_user_response(u) for u in ops.list_users(ctx)]


@router.get("/me", response_model=UserResponse)
def get_me(
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    """Get current authenticated user info."""
    return to_user_response(ops.me(ctx))


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    return to_user_response(ops.get_user(user_id, ctx))


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    request: UpdateUserRequest,
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    changes = UserChanges(
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return to_user_response(ops.update_user(user_id, changes, ctx))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    """Delete own account and every task it owns."""
    ops.delete_user(user_id, ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
