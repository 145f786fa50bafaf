"""
Attach Manager: Lazy Creation of Monthly Partitions

ensure(date) makes the month's partition usable by the session:
1. Compute the partition key and identifier
2. Return immediately if the catalog already has it
3. Otherwise, under the catalog lock: create the partition directory,
   ATTACH IF NOT EXISTS the file, CREATE TABLE IF NOT EXISTS users
4. Record the key in the catalog

Idempotent: once a month is attached, later calls are no-ops.
Failures are returned as AttachError and never retried.
"""

from __future__ import annotations

import logging
from datetime import date

import duckdb

from monthmesh.core.config import StorageConfig
from monthmesh.core.errors import AttachError, StorageError
from monthmesh.core.types import Result, Ok, Err
from monthmesh.partition.catalog import PartitionCatalog
from monthmesh.partition.keys import PartitionId, PartitionKey
from monthmesh.storage.engine import DuckDBEngine
from monthmesh.storage.schema import attach_sql, create_table_sql

logger = logging.getLogger(__name__)


class AttachManager:
    """
    Ensures partitions exist physically and carry the users table.

    Usage:
        manager = AttachManager(engine, catalog, config.storage)
        result = await manager.ensure(date(2024, 3, 15))
        partition = result.unwrap()  # PartitionId("202403")
    """

    __slots__ = ("_engine", "_catalog", "_storage")

    def __init__(
        self,
        engine: DuckDBEngine,
        catalog: PartitionCatalog,
        storage: StorageConfig,
    ) -> None:
        self._engine = engine
        self._catalog = catalog
        self._storage = storage

    async def ensure(self, value: date) -> Result[PartitionId, AttachError]:
        """Ensure the partition holding `value` is attached."""
        return await self.ensure_key(PartitionKey.of(value))

    async def ensure_key(self, key: PartitionKey) -> Result[PartitionId, AttachError]:
        partition = key.identifier
        if key in self._catalog:
            return Ok(partition)

        async with self._catalog.lock:
            # Another task may have attached it while we waited
            if key in self._catalog:
                return Ok(partition)

            result = await self._attach(partition)
            if result.is_err():
                return result

            self._catalog.record(key)

        logger.info(
            "Partition attached",
            extra={"partition": partition.value, "partitions": len(self._catalog)},
        )
        return Ok(partition)

    async def _attach(self, partition: PartitionId) -> Result[PartitionId, AttachError]:
        path = self._storage.partition_path(partition.value)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Partition directory creation failed: {e}")
            return Err(AttachError.directory_failed(
                partition.value, str(path.parent), cause=e,
            ))

        statements = (
            attach_sql(partition, str(path)),
            create_table_sql(partition, self._storage.table_name),
        )

        def run(conn: duckdb.DuckDBPyConnection) -> None:
            for sql in statements:
                conn.execute(sql)

        try:
            await self._engine.submit(run)
        except (duckdb.Error, StorageError) as e:
            error = AttachError.partition_failed(partition.value, cause=e)
            logger.error("Partition attach failed", extra=error.to_dict())
            return Err(error)

        return Ok(partition)
