"""
Engine: DuckDB Session with a Single Serialized Execution Context

Provides the one connection all partition work goes through:
- In-memory DuckDB database; partitions are ATTACHed files
- Every operation runs on one dedicated worker thread
- Callers await operations; they never run concurrently

Thread Safety:
- The connection is only touched from the worker thread
- Submission order is the execution order
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, TypeVar

import duckdb

from monthmesh.core import constants as C
from monthmesh.core.errors import StorageError
from monthmesh.core.types import Result, Ok, Err

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run(
    conn: duckdb.DuckDBPyConnection,
    sql: str,
    params: Sequence[Any],
) -> duckdb.DuckDBPyConnection:
    if params:
        return conn.execute(sql, list(params))
    return conn.execute(sql)


@dataclass
class EngineStats:
    """Engine statistics."""

    submitted: int = 0
    failed: int = 0


class DuckDBEngine:
    """
    Serialized DuckDB session.

    Usage:
        engine = DuckDBEngine()
        await engine.initialize()

        rows = await engine.submit(
            lambda conn: conn.execute("SELECT 42").fetchall()
        )

        await engine.close()
    """

    __slots__ = ("_database", "_conn", "_executor", "_stats", "_closed")

    def __init__(self, database: str = C.ENGINE_DATABASE) -> None:
        self._database = database
        self._conn: Optional[duckdb.DuckDBPyConnection] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._stats = EngineStats()
        self._closed = False

    async def initialize(self) -> Result[None, StorageError]:
        """Open the connection on the worker thread."""
        if self._conn is not None:
            return Ok(None)
        if self._closed:
            return Err(StorageError.closed())

        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=C.ENGINE_THREAD_NAME,
        )
        loop = asyncio.get_running_loop()
        try:
            self._conn = await loop.run_in_executor(
                self._executor, duckdb.connect, self._database
            )
        except duckdb.Error as e:
            logger.error(f"Engine initialization failed: {e}")
            self._executor.shutdown(wait=False)
            self._executor = None
            return Err(StorageError.connection_failed(self._database, cause=e))

        logger.info("Engine initialized", extra={"database": self._database})
        return Ok(None)

    async def submit(self, fn: Callable[[duckdb.DuckDBPyConnection], T]) -> T:
        """
        Run `fn(connection)` on the worker thread and await its result.

        Exceptions raised by `fn` propagate to the awaiting caller.

        Raises:
            StorageError: engine not initialized or already closed
        """
        if self._closed:
            raise StorageError.closed()
        if self._conn is None or self._executor is None:
            raise StorageError.not_initialized()

        conn = self._conn
        loop = asyncio.get_running_loop()
        self._stats.submitted += 1
        try:
            return await loop.run_in_executor(self._executor, fn, conn)
        except Exception:
            self._stats.failed += 1
            raise

    async def execute(
        self,
        sql: str,
        params: Sequence[Any] = (),
    ) -> Result[None, StorageError]:
        """Execute a statement, discarding any result rows."""
        try:
            await self.submit(lambda conn: _run(conn, sql, params))
            return Ok(None)
        except StorageError as e:
            return Err(e)
        except duckdb.Error as e:
            return Err(StorageError.statement_failed(self._database, cause=e))

    async def fetch_all(
        self,
        sql: str,
        params: Sequence[Any] = (),
    ) -> Result[list[tuple[Any, ...]], StorageError]:
        """Execute a query and return all rows."""
        try:
            rows = await self.submit(
                lambda conn: _run(conn, sql, params).fetchall()
            )
            return Ok(rows)
        except StorageError as e:
            return Err(e)
        except duckdb.Error as e:
            return Err(StorageError.statement_failed(self._database, cause=e))

    async def attached_databases(self) -> Result[list[str], StorageError]:
        """Names of all databases attached to the session, from the engine's own catalog."""
        result = await self.fetch_all(
            "SELECT database_name FROM duckdb_databases() ORDER BY database_name"
        )
        return result.map(lambda rows: [row[0] for row in rows])

    @property
    def stats(self) -> EngineStats:
        return self._stats

    @property
    def is_open(self) -> bool:
        return self._conn is not None and not self._closed

    async def close(self) -> None:
        """Close the connection (detaching all partitions) and stop the worker."""
        if self._closed:
            return
        self._closed = True

        if self._conn is not None and self._executor is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(self._executor, self._conn.close)
        if self._executor is not None:
            self._executor.shutdown(wait=True)

        self._conn = None
        self._executor = None
        logger.info("Engine closed")

    async def __aenter__(self) -> DuckDBEngine:
        result = await self.initialize()
        if result.is_err():
            raise result.error
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
