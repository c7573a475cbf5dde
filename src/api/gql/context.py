"""GraphQL request context and domain error translation."""

import logging
from contextlib import contextmanager

from fastapi import Depends
from graphql import GraphQLError
from strawberry.types import Info

from api.dependencies import get_operations
from api.errors import INTERNAL, classify, public_message
from api.security import get_request_context
from services.operations import DomainOperations, RequestContext

logger = logging.getLogger(__name__)


def get_graphql_context(
    ctx: RequestContext = Depends(get_request_context),
    ops: DomainOperations = Depends(get_operations),
) -> dict:
    """Context getter for the GraphQL router; resolved like any FastAPI dependency."""
    return {"request_context": ctx, "operations": ops}


def operations(info: Info) -> DomainOperations:
    return info.context["operations"]


def request_context(info: Info) -> RequestContext:
    return info.context["request_context"]


def to_graphql_error(exc: Exception) -> GraphQLError:
    """Build the GraphQL error for an exception using the shared error table."""
    mapping = classify(exc)
    return GraphQLError(public_message(exc), extensions={"code": mapping.graphql_code})


@contextmanager
def domain_errors():
    """Re-raise exceptions from the domain as coded GraphQL errors.

    Unexpected exceptions are logged with their traceback and reported as a
    generic internal error.
    """
    try:
        yield
    except GraphQLError:
        raise
    except Exception as exc:
        if classify(exc) is INTERNAL:
            logger.exception("Internal error in resolver")
        raise to_graphql_error(exc) from exc
