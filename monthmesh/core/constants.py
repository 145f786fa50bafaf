"""
System-Wide Constants for MonthMesh

All defaults for partition layout, the hot window and the server
are centralized here.
"""

from typing import Final

# =============================================================================
# PARTITION LAYOUT
# =============================================================================
PARTITION_DIR: Final[str] = "repositories"
PARTITION_SUFFIX: Final[str] = ".db"
PARTITION_TABLE: Final[str] = "users"

# Identifier is YYYYMM: 4-digit year + 2-digit month
PARTITION_ID_LENGTH: Final[int] = 6

# =============================================================================
# HOT WINDOW
# =============================================================================
WINDOW_MONTHS: Final[int] = 12
MAX_WINDOW_MONTHS: Final[int] = 12 * 100

# =============================================================================
# SERVER
# =============================================================================
DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8080

# =============================================================================
# ENGINE
# =============================================================================
ENGINE_DATABASE: Final[str] = ":memory:"
ENGINE_THREAD_NAME: Final[str] = "monthmesh-duckdb"

# =============================================================================
# OBSERVABILITY
# =============================================================================
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
