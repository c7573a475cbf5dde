"""Identity normalization for comparing REST and GraphQL payloads.

The two transports identify entities differently: REST uses the integer
sequence number, GraphQL the opaque id. Neither can be converted into the
other, so ids are only checked for presence and then removed; everything
else is brought to one comparable form.
"""

import re
from enum import Enum
from typing import Any, Iterable

# every entity carries its own id; user_id only exists on tasks
REQUIRED_ID_FIELDS = ("id",)
ID_FIELDS = ("id", "user_id")
ENUM_FIELDS = ("status", "priority")
TIMESTAMP_FIELDS = ("created_at", "updated_at")

DEFAULT_IGNORED_FIELDS = frozenset(TIMESTAMP_FIELDS)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


class InvalidIdError(ValueError):
    """An id field is missing or unusable. ``field`` is the dotted path to it."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def nested_under(self, prefix: str) -> "InvalidIdError":
        return InvalidIdError(f"{prefix}.{self.field}", self.reason)


def normalize_id(raw: Any, field: str = "id") -> str:
    """Return the string form of an id from either transport.

    Raises:
        InvalidIdError: the id is missing, a boolean, or blank
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidIdError(field, f"invalid id {raw!r}")
    value = str(raw).strip()
    if not value:
        raise InvalidIdError(field, "empty id")
    return value


def normalize_key(key: str) -> str:
    """camelCase -> snake_case. snake_case keys pass through unchanged."""
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def normalize_enum(value: Any) -> Any:
    """Canonical enum form: GraphQL ``IN_PROGRESS`` and REST ``in-progress`` both become ``in-progress``."""
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return value
    return value.strip().lower().replace("_", "-")


def _normalize_value(value: Any, ignore: Iterable[str], key: str) -> Any:
    if isinstance(value, dict):
        try:
            return normalize_entity(value, ignore)
        except InvalidIdError as exc:
            raise exc.nested_under(key) from None
    if isinstance(value, list):
        return [_normalize_value(item, ignore, f"{key}[{index}]") for index, item in enumerate(value)]
    return value


def normalize_entity(
    entity: dict,
    ignore: Iterable[str] = DEFAULT_IGNORED_FIELDS,
    require_id: bool = True,
) -> dict:
    """Bring an entity payload from either transport to a comparable shape.

    Keys become snake_case. Id fields must be present and non-empty and are
    then dropped. Enum fields are canonicalized and ignored fields (the
    timestamps by default) are removed. Nested entities are normalized the
    same way.

    ``require_id=False`` accepts an envelope without an id of its own, such
    as a login payload; entities nested inside it still need theirs.

    Raises:
        InvalidIdError: a required id is missing or any id is empty
    """
    ignore = frozenset(ignore)
    snake = {normalize_key(key): value for key, value in entity.items()}

    if require_id:
        for field in REQUIRED_ID_FIELDS:
            if field not in snake:
                raise InvalidIdError(field, "missing id")
    for field in ID_FIELDS:
        if field in snake:
            normalize_id(snake[field], field)

    result = {}
    for key, value in snake.items():
        if key in ID_FIELDS or key in ignore:
            continue
        if key in ENUM_FIELDS:
            result[key] = normalize_enum(value)
        else:
            result[key] = _normalize_value(value, ignore, key)
    return result
