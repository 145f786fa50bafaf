"""
Error Hierarchy for MonthMesh

Design Principles:
- Errors are values returned inside Err, not raised across layers
- Each error carries a code, a human-readable message and its cause
- The message is what reaches HTTP callers; code and context go to logs

Usage:
    result = await repository.create_user(user)
    if result.is_err():
        error = result.error
        logger.error(str(error), extra=error.to_dict())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence
from uuid import uuid4

from monthmesh.core.types import Timestamp


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Error codes for logging and programmatic handling.
    
    Codes are grouped by subsystem:
    - 1xxx: Storage engine errors
    - 2xxx: Partition attach errors
    - 3xxx: Insert (write path) errors
    - 4xxx: Query (read path) errors
    - 9xxx: Internal/configuration errors
    """
    
    STORAGE_CONNECTION_FAILED = 1001
    STORAGE_NOT_INITIALIZED = 1002
    STORAGE_CLOSED = 1003
    STORAGE_STATEMENT_FAILED = 1004
    
    ATTACH_PARTITION_FAILED = 2001
    ATTACH_DIRECTORY_FAILED = 2002
    
    INSERT_WRITE_FAILED = 3001
    INSERT_VALIDATION_FAILED = 3002
    
    QUERY_EXECUTION_FAILED = 4001
    QUERY_DECODE_FAILED = 4002
    
    INTERNAL_ERROR = 9001
    INTERNAL_CONFIGURATION_ERROR = 9002


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class MonthMeshError(Exception):
    """
    Base class for all MonthMesh errors.
    
    Provides:
    - Unique error ID for log correlation
    - Error code for programmatic handling
    - Cause chain for root cause analysis
    """
    
    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: Timestamp = field(default_factory=Timestamp.now)
    cause: Optional[BaseException] = None
    context: dict[str, Any] = field(default_factory=dict)
    
    def __post_init__(self) -> None:
        super().__init__(self.message)
    
    def to_dict(self) -> dict[str, Any]:
        """Serialize error for structured logging."""
        data = {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "error_message": self.message,
            "timestamp_nanos": self.timestamp.nanos,
            "context": self.context,
        }
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        return data
    
    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message
    
    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# STORAGE ERRORS (ENGINE LIFECYCLE)
# =============================================================================
@dataclass
class StorageError(MonthMeshError):
    """Errors from the embedded engine itself: opening, closing, usage before init."""
    
    @classmethod
    def connection_failed(
        cls,
        database: str,
        cause: Optional[BaseException] = None,
    ) -> StorageError:
        return cls(
            code=ErrorCode.STORAGE_CONNECTION_FAILED,
            message=f"Failed to open database '{database}'",
            cause=cause,
            context={"database": database},
        )
    
    @classmethod
    def not_initialized(cls) -> StorageError:
        return cls(
            code=ErrorCode.STORAGE_NOT_INITIALIZED,
            message="Storage engine not initialized",
        )
    
    @classmethod
    def closed(cls) -> StorageError:
        return cls(
            code=ErrorCode.STORAGE_CLOSED,
            message="Storage engine is closed",
        )
    
    @classmethod
    def statement_failed(
        cls,
        database: str,
        cause: Optional[BaseException] = None,
    ) -> StorageError:
        return cls(
            code=ErrorCode.STORAGE_STATEMENT_FAILED,
            message=f"Statement failed on database '{database}'",
            cause=cause,
            context={"database": database},
        )


# =============================================================================
# ATTACH ERRORS (PARTITION CREATION)
# =============================================================================
@dataclass
class AttachError(MonthMeshError):
    """
    Partition storage or table could not be created/attached.
    
    Aborts the create or list operation that triggered it.
    """
    
    @property
    def identifier(self) -> str:
        return self.context.get("partition", "")
    
    @classmethod
    def partition_failed(
        cls,
        identifier: str,
        cause: Optional[BaseException] = None,
    ) -> AttachError:
        return cls(
            code=ErrorCode.ATTACH_PARTITION_FAILED,
            message=f"Failed to attach partition '{identifier}'",
            cause=cause,
            context={"partition": identifier},
        )
    
    @classmethod
    def directory_failed(
        cls,
        identifier: str,
        directory: str,
        cause: Optional[BaseException] = None,
    ) -> AttachError:
        return cls(
            code=ErrorCode.ATTACH_DIRECTORY_FAILED,
            message=f"Failed to create partition directory '{directory}' for '{identifier}'",
            cause=cause,
            context={"partition": identifier, "directory": directory},
        )


# =============================================================================
# INSERT ERRORS (WRITE PATH)
# =============================================================================
@dataclass
class InsertError(MonthMeshError):
    """Constraint violation, bad input or write failure on a single insert."""
    
    @classmethod
    def write_failed(
        cls,
        identifier: str,
        cause: Optional[BaseException] = None,
    ) -> InsertError:
        return cls(
            code=ErrorCode.INSERT_WRITE_FAILED,
            message=f"Failed to create user in partition '{identifier}'",
            cause=cause,
            context={"partition": identifier},
        )
    
    @classmethod
    def validation_failed(
        cls,
        field: str,
        value: Any,
        reason: str,
    ) -> InsertError:
        return cls(
            code=ErrorCode.INSERT_VALIDATION_FAILED,
            message=f"Validation failed for field '{field}': {reason}",
            context={"field": field, "value": str(value)[:100], "reason": reason},
        )


# =============================================================================
# QUERY ERRORS (READ PATH)
# =============================================================================
@dataclass
class QueryError(MonthMeshError):
    """Merged-query construction or execution failure."""
    
    @classmethod
    def execution_failed(
        cls,
        partitions: Sequence[str],
        cause: Optional[BaseException] = None,
    ) -> QueryError:
        return cls(
            code=ErrorCode.QUERY_EXECUTION_FAILED,
            message="Failed to list users",
            cause=cause,
            context={"partitions": list(partitions)},
        )
    
    @classmethod
    def decode_failed(
        cls,
        row: Any,
        cause: Optional[BaseException] = None,
    ) -> QueryError:
        return cls(
            code=ErrorCode.QUERY_DECODE_FAILED,
            message="Failed to decode user row",
            cause=cause,
            context={"row": str(row)[:200]},
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================
@dataclass
class ConfigurationError(MonthMeshError):
    """Invalid configuration detected at startup."""
    
    @classmethod
    def invalid(cls, reason: str) -> ConfigurationError:
        return cls(
            code=ErrorCode.INTERNAL_CONFIGURATION_ERROR,
            message=f"Invalid configuration: {reason}",
            context={"reason": reason},
        )
