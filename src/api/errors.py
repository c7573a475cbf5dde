"""Error mapping shared by the REST and GraphQL adapters.

One row per domain error class: the HTTP status the REST routes answer with
and the ``extensions.code`` the GraphQL endpoint reports. Both adapters and
the equivalence harness read this table, so a given failure means the same
thing on either transport.
"""

import logging
from dataclasses import dataclass

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from domain.model.errors import (
    DomainError,
    DuplicateError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


@dataclass(frozen=True)
class ErrorMapping:
    kind: str
    http_status: int
    graphql_code: str


INVALID_INPUT = ErrorMapping("InvalidInput", status.HTTP_400_BAD_REQUEST, "BAD_USER_INPUT")
DUPLICATE_IDENTITY = ErrorMapping("DuplicateIdentity", status.HTTP_409_CONFLICT, "CONFLICT")
INVALID_CREDENTIALS = ErrorMapping("InvalidCredentials", status.HTTP_401_UNAUTHORIZED, "INVALID_CREDENTIALS")
UNAUTHENTICATED = ErrorMapping("Unauthenticated", status.HTTP_401_UNAUTHORIZED, "UNAUTHENTICATED")
FORBIDDEN = ErrorMapping("Forbidden", status.HTTP_403_FORBIDDEN, "FORBIDDEN")
NOT_FOUND = ErrorMapping("NotFound", status.HTTP_404_NOT_FOUND, "NOT_FOUND")
INTERNAL = ErrorMapping("InternalError", status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_SERVER_ERROR")

ERROR_TABLE: dict[type[DomainError], ErrorMapping] = {
    ValidationError: INVALID_INPUT,
    DuplicateError: DUPLICATE_IDENTITY,
    InvalidCredentialsError: INVALID_CREDENTIALS,
    UnauthenticatedError: UNAUTHENTICATED,
    PermissionDeniedError: FORBIDDEN,
    NotFoundError: NOT_FOUND,
    InternalError: INTERNAL,
}

# GraphQL schema validation errors (unknown enum value, missing argument)
# are raised by the engine before any resolver runs and carry no code.
GRAPHQL_VALIDATION_CODE = "GRAPHQL_VALIDATION_FAILED"

_BY_GRAPHQL_CODE = {m.graphql_code: m for m in ERROR_TABLE.values()}
_BY_GRAPHQL_CODE[GRAPHQL_VALIDATION_CODE] = INVALID_INPUT


def classify(exc: BaseException) -> ErrorMapping:
    """Return the mapping for an exception; anything unknown is internal."""
    for cls in type(exc).__mro__:
        if cls in ERROR_TABLE:
            return ERROR_TABLE[cls]
    return INTERNAL


def public_message(exc: BaseException) -> str:
    """Message safe to send to a client. Internal failures stay generic."""
    if classify(exc) is INTERNAL:
        return INTERNAL_ERROR_MESSAGE
    return str(exc)


def mapping_for_graphql_code(code: str | None) -> ErrorMapping:
    return _BY_GRAPHQL_CODE.get(code or GRAPHQL_VALIDATION_CODE, INTERNAL)


def mapping_for_http_status(status_code: int) -> ErrorMapping:
    """Reverse lookup used by the harness. 401 is ambiguous; callers pass the code too."""
    for mapping in ERROR_TABLE.values():
        if mapping.http_status == status_code:
            return mapping
    return INTERNAL


def mapping_for_rest_code(code: str | None, status_code: int) -> ErrorMapping:
    if code:
        mapping = _BY_GRAPHQL_CODE.get(code)
        if mapping is not None and mapping.http_status == status_code:
            return mapping
    return mapping_for_http_status(status_code)


# ── REST exception handlers ──────────────────────────────────


def _error_response(mapping: ErrorMapping, message: str) -> JSONResponse:
    headers = None
    if mapping.http_status == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=mapping.http_status,
        content={"detail": message, "code": mapping.graphql_code},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register the domain, validation and catch-all handlers on the app."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        mapping = classify(exc)
        if mapping is INTERNAL:
            logger.error("Internal error", extra={"path": request.url.path, "error": str(exc)})
        else:
            logger.info("Request rejected", extra={"path": request.url.path, "kind": mapping.kind})
        return _error_response(mapping, public_message(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else "Invalid request"
        logger.info("Request validation failed", extra={"path": request.url.path, "errorCount": len(errors)})
        return _error_response(INVALID_INPUT, message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return _error_response(INTERNAL, INTERNAL_ERROR_MESSAGE)
