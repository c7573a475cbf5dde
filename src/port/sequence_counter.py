"""Port definition for SequenceCounter."""

from typing import Protocol

USER_SEQUENCE = 'userId'
TASK_SEQUENCE = 'taskId'

# sequences are stored as BSON int64
MAX_SEQUENCE_VALUE = 2**63 - 1


def in_sequence_range(value: int) -> bool:
    """True if ``value`` could be an issued sequence number."""
    return 1 <= value <= MAX_SEQUENCE_VALUE


class SequenceCounter(Protocol):
    def next_value(self, name: str) -> int:
        """Atomically increment counter ``name`` and return the new value."""
        ...
