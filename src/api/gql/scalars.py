"""Custom GraphQL scalars."""

import logging
from datetime import datetime
from typing import NewType, Optional

import strawberry

from api.serialization import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


def parse_datetime_lenient(value) -> Optional[datetime]:
    """Parse an ISO 8601 input value.

    Malformed values become null instead of failing the request.
    """
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable DateTime input treated as null", extra={"value": repr(value)[:100]})
        return None


DateTime = NewType("DateTime", datetime)

# bound to DateTime through the schema config
DATETIME_SCALAR = strawberry.scalar(
    name="DateTime",
    serialize=format_timestamp,
    parse_value=parse_datetime_lenient,
    description="ISO 8601 timestamp in UTC, e.g. 2026-01-23T12:00:00.000Z",
)
