"""
Storage module: DuckDB engine, partition attach, merged reads and the user repository.
"""

from monthmesh.storage.engine import DuckDBEngine
from monthmesh.storage.schema import User
from monthmesh.storage.attach import AttachManager
from monthmesh.storage.merged import MergedQuery, MergedQueryBuilder
from monthmesh.storage.repositories import UserRepository

__all__ = [
    "DuckDBEngine",
    "User",
    "AttachManager",
    "MergedQuery",
    "MergedQueryBuilder",
    "UserRepository",
]
