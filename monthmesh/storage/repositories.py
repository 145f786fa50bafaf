"""
User Repository: Facade over Monthly Partitions

Provides:
- create_user: ensure the month's partition, insert, return the stored row
- list_hot_users: read every user in the hot window with one merged query

Data flow:
    write: ensure(partition) -> parameterized INSERT ... RETURNING
    read:  hot window -> catalog -> merged query -> execute -> decode
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Optional

import duckdb

from monthmesh.core.config import MonthMeshConfig, ReadFailurePolicy
from monthmesh.core.errors import (
    InsertError,
    MonthMeshError,
    QueryError,
    StorageError,
)
from monthmesh.core.types import Result, Ok, Err
from monthmesh.partition.catalog import PartitionCatalog, scan_partition_dir
from monthmesh.partition.window import HotWindow, hot_window
from monthmesh.storage.attach import AttachManager
from monthmesh.storage.engine import DuckDBEngine
from monthmesh.storage.merged import MergedQueryBuilder
from monthmesh.storage.schema import User, insert_sql, name_problem

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


class UserRepository:
    """
    Partitioned user store.

    Usage:
        result = await UserRepository.open(config)
        repository = result.unwrap()

        await repository.create_user(User(1, "Alice", date(2024, 1, 10)))
        users = (await repository.list_hot_users()).unwrap()

        await repository.close()
    """

    __slots__ = ("_engine", "_catalog", "_attach", "_builder", "_config", "_clock")

    def __init__(
        self,
        engine: DuckDBEngine,
        catalog: PartitionCatalog,
        config: Optional[MonthMeshConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._config = config or MonthMeshConfig()
        self._engine = engine
        self._catalog = catalog
        self._attach = AttachManager(engine, catalog, self._config.storage)
        self._builder = MergedQueryBuilder(self._config.storage.table_name)
        self._clock = clock or date.today

    @classmethod
    async def open(
        cls,
        config: Optional[MonthMeshConfig] = None,
        clock: Optional[Clock] = None,
    ) -> Result[UserRepository, MonthMeshError]:
        """
        Start the engine and attach every partition file already on disk.

        Cold partitions are attached too so writes to old months and
        later window advances see existing data.
        """
        config = config or MonthMeshConfig()
        engine = DuckDBEngine()
        init = await engine.initialize()
        if init.is_err():
            return init

        repository = cls(engine, PartitionCatalog(), config, clock)
        try:
            existing = scan_partition_dir(
                config.storage.partition_dir, config.storage.file_suffix,
            )
        except OSError as e:
            await engine.close()
            return Err(StorageError.connection_failed(
                str(config.storage.partition_dir), cause=e,
            ))

        for key in existing:
            result = await repository._attach.ensure_key(key)
            if result.is_err():
                await engine.close()
                return result

        logger.info(
            "Repository opened",
            extra={
                "partition_dir": str(config.storage.partition_dir),
                "partitions": len(repository._catalog),
                "window_months": config.window.months,
            },
        )
        return Ok(repository)

    @property
    def catalog(self) -> PartitionCatalog:
        return self._catalog

    @property
    def engine(self) -> DuckDBEngine:
        return self._engine

    def window(self) -> HotWindow:
        """Hot window as of the repository clock. Recomputed on every call."""
        return hot_window(self._clock(), self._config.window.months)

    async def create_user(self, user: User) -> Result[User, MonthMeshError]:
        """Store `user` in the partition of its registration month."""
        reason = name_problem(user.name)
        if reason is not None:
            return Err(InsertError.validation_failed("name", user.name, reason))

        ensured = await self._attach.ensure(user.registered_date)
        if ensured.is_err():
            return ensured
        partition = ensured.unwrap()

        sql = insert_sql(partition, self._config.storage.table_name)
        params = user.to_params()
        try:
            row = await self._engine.submit(
                lambda conn: conn.execute(sql, params).fetchone()
            )
        except (duckdb.Error, StorageError) as e:
            error = InsertError.write_failed(partition.value, cause=e)
            logger.error("User insert failed", extra=error.to_dict())
            return Err(error)

        if row is None:
            return Err(InsertError.write_failed(partition.value))
        return Ok(User.from_row(row))

    async def list_hot_users(self) -> Result[list[User], QueryError]:
        """
        All users whose partition lies in the hot window.

        Returns Ok([]) without touching the engine when nothing is hot.
        On failure the configured ReadFailurePolicy decides between
        returning the QueryError and returning Ok([]).
        """
        window = self.window()
        query = await self._builder.plan(self._catalog, window)
        if query is None:
            return Ok([])

        result = await self._fetch(query.sql, query.identifiers)
        if result.is_ok():
            return result

        if self._config.read_failure_policy is ReadFailurePolicy.DEGRADE_TO_EMPTY:
            logger.warning(
                "Hot user listing failed, returning empty result",
                extra={**result.error.to_dict(), "window": str(window)},
            )
            return Ok([])
        logger.error("Hot user listing failed", extra=result.error.to_dict())
        return result

    async def _fetch(
        self,
        sql: str,
        partitions: list[str],
    ) -> Result[list[User], QueryError]:
        try:
            rows: list[Any] = await self._engine.submit(
                lambda conn: conn.execute(sql).fetchall()
            )
        except (duckdb.Error, StorageError) as e:
            return Err(QueryError.execution_failed(partitions, cause=e))

        users: list[User] = []
        for row in rows:
            try:
                users.append(User.from_row(row))
            except (TypeError, ValueError) as e:
                return Err(QueryError.decode_failed(row, cause=e))
        return Ok(users)

    async def close(self) -> None:
        await self._engine.close()

    async def __aenter__(self) -> UserRepository:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
