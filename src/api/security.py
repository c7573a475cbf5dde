"""Bearer token extraction shared by the REST routes and the GraphQL context."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from services.operations import RequestContext

# Missing or non-Bearer header yields an empty RequestContext.
security = HTTPBearer(auto_error=False)


def get_request_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> RequestContext:
    """Build the RequestContext from the ``Authorization: Bearer`` header."""
    if not credentials:
        return RequestContext()
    return RequestContext(token=credentials.credentials)
