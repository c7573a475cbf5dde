"""Structured JSON logging configuration."""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Any


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Extra fields passed through ``extra={...}`` become top-level keys.
    Keys that may hold credentials are replaced by a placeholder.
    """

    # Standard LogRecord attributes that should not be included as extra fields
    _STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname',
        'process', 'processName', 'relativeCreated', 'thread', 'threadName',
        'exc_info', 'exc_text', 'stack_info', 'taskName'
    }
    REDACTED_KEYS = {'password', 'password_hash', 'token', 'authorization', 'secret'}
    REDACTED = '***'

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in self._STANDARD_ATTRS or callable(value):
                continue
            log_data[key] = self.REDACTED if key.lower() in self.REDACTED_KEYS else value

        return json.dumps(log_data, default=str)


def setup_structured_logging(level: str | None = None):
    """Configure structured JSON logging for the application.

    Level comes from ``level`` or the LOG_LEVEL environment variable.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = [handler]
    uvicorn_access.setLevel(logging.WARNING)

    logging.getLogger("pymongo").setLevel(logging.WARNING)

    # GraphQL errors are logged by the schema itself
    logging.getLogger("strawberry.execution").setLevel(logging.CRITICAL)
