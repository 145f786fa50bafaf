"""
MonthMesh: Monthly-Partitioned User Store on DuckDB

Stores user registrations in one DuckDB file per calendar month and
serves them through a minimal HTTP API:
- Partition keys: registration date -> YYYYMM partition
- Attach manager: lazy, idempotent ATTACH + CREATE TABLE per month
- Hot window: current month plus the preceding N months (default 12)
- Merged query: one UNION ALL over every hot partition

License: MIT
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from monthmesh.core.types import Result, Ok, Err
from monthmesh.core.errors import (
    MonthMeshError,
    StorageError,
    AttachError,
    InsertError,
    QueryError,
    ConfigurationError,
)
from monthmesh.core.config import MonthMeshConfig, ReadFailurePolicy
from monthmesh.partition import (
    PartitionKey,
    PartitionId,
    PartitionCatalog,
    HotWindow,
    hot_window,
    key_of,
    identifier_of,
    parse_identifier,
)
from monthmesh.storage import (
    DuckDBEngine,
    AttachManager,
    MergedQuery,
    MergedQueryBuilder,
    User,
    UserRepository,
)

__all__ = [
    "__version__",
    # Result container
    "Result",
    "Ok",
    "Err",
    # Errors
    "MonthMeshError",
    "StorageError",
    "AttachError",
    "InsertError",
    "QueryError",
    "ConfigurationError",
    # Config
    "MonthMeshConfig",
    "ReadFailurePolicy",
    # Partitions
    "PartitionKey",
    "PartitionId",
    "PartitionCatalog",
    "HotWindow",
    "hot_window",
    "key_of",
    "identifier_of",
    "parse_identifier",
    # Storage
    "DuckDBEngine",
    "AttachManager",
    "MergedQuery",
    "MergedQueryBuilder",
    "User",
    "UserRepository",
]
