"""
Core module: Result container, error hierarchy and configuration.
"""

from monthmesh.core.types import Result, Ok, Err, Timestamp
from monthmesh.core.errors import (
    ErrorCode,
    MonthMeshError,
    StorageError,
    AttachError,
    InsertError,
    QueryError,
    ConfigurationError,
)
from monthmesh.core.config import MonthMeshConfig, ReadFailurePolicy

__all__ = [
    "Result",
    "Ok",
    "Err",
    "Timestamp",
    "ErrorCode",
    "MonthMeshError",
    "StorageError",
    "AttachError",
    "InsertError",
    "QueryError",
    "ConfigurationError",
    "MonthMeshConfig",
    "ReadFailurePolicy",
]
