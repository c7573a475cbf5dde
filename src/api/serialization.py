"""Timestamp wire format shared by both transports.

Canonical form: ISO 8601 in UTC with millisecond precision and a ``Z``
suffix, e.g. ``2026-01-23T12:00:00.000Z``. MongoDB stores milliseconds, so
this is also the precision that survives a round trip through the store.
"""

from datetime import datetime, timezone


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 string. Naive values are taken as UTC.

    Raises ValueError (or TypeError for non-strings) on malformed input.
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected an ISO 8601 string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
