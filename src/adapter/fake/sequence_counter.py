"""In-memory implementation of SequenceCounter for testing."""

import threading


class FakeSequenceCounter:
    def __init__(self):
        self.values: dict[str, int] = {}
        self._lock = threading.Lock()

    def next_value(self, name: str) -> int:
        with self._lock:
            value = self.values.get(name, 0) + 1
            self.values[name] = value
            return value
