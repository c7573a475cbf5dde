"""Session routes (login, logout).

Tokens are stateless: logout only confirms the caller is authenticated,
the client is expected to discard its token.
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_operations
from api.models import LoginRequest, SessionResponse, to_user_response
from api.security import get_request_context
from services.operations import DomainOperations, RequestContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse)
def login(
    request: LoginRequest,
    ops: DomainOperations = Depends(get_operations),
):
    """Login user and return JWT token.

    Raises 401 with the same message for an unknown email and a wrong password.
    """
    session = ops.login(request.email, request.password)
    return SessionResponse(token=session.token, user=to_user_response(session.user))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
):
    ops.logout(ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
