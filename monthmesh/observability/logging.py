"""
Structured Logging: JSON Lines with Request Context

Modules log through logging.getLogger(__name__) with extra={...}
(partition, window, error code); JsonFormatter folds those fields and
any request-scoped context into one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Optional, TextIO


class LogLevel(IntEnum):
    """Log level enumeration."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def parse(cls, name: str) -> LogLevel:
        return cls[name.upper()]


# Request-scoped fields (request_id) merged into every record
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# Attributes every logging.LogRecord has; anything else came from extra=
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message", "asctime",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: level, logger, message, context and extras."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "@timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(_log_context.get())
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                data[key] = value

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class StructuredLogger:
    """
    Logger taking fields as keyword arguments.

    Usage:
        logger = StructuredLogger("monthmesh.api")

        with logger.context(request_id="abc"):
            logger.info("Request completed", path="/users", status=200)
    """

    __slots__ = ("_logger",)

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    def info(self, message: str, **fields: Any) -> None:
        self._logger.info(message, extra=fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._logger.warning(message, extra=fields)

    def error(self, message: str, **fields: Any) -> None:
        self._logger.error(message, extra=fields)

    @staticmethod
    def context(**fields: Any) -> _LogContext:
        """Context manager adding `fields` to every record logged inside it."""
        return _LogContext(fields)


class _LogContext:
    __slots__ = ("_fields", "_token")

    def __init__(self, fields: dict[str, Any]) -> None:
        self._fields = fields
        self._token = None

    def __enter__(self) -> _LogContext:
        self._token = _log_context.set({**_log_context.get(), **self._fields})
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            _log_context.reset(self._token)


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Minimum log level
        json_output: JSON lines instead of the plain text format
        stream: Output stream (default: stderr)
    """
    root = logging.getLogger()
    root.setLevel(level.value)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        ))
    root.addHandler(handler)

    # uvicorn logs its own access lines; requests are logged by the middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
