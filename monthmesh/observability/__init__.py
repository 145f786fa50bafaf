"""
Observability module: structured logging.
"""

from monthmesh.observability.logging import (
    JsonFormatter,
    StructuredLogger,
    LogLevel,
    setup_logging,
)

__all__ = [
    "JsonFormatter",
    "StructuredLogger",
    "LogLevel",
    "setup_logging",
]
