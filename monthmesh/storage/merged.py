"""
Merged Query: One Read Over All Hot Partitions

Builds a single UNION ALL statement over the users table of every
attached partition inside the hot window. Partitions are ordered by
ascending month so that output order is reproducible.

The statement is built fresh per read from the catalog; no view is
materialized, so nothing has to be invalidated when partitions are
attached or fall out of the window.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from monthmesh.core import constants as C
from monthmesh.partition.catalog import PartitionCatalog
from monthmesh.partition.keys import PartitionId, PartitionKey
from monthmesh.partition.window import HotWindow
from monthmesh.storage.schema import select_all_sql


@dataclass(frozen=True, slots=True)
class MergedQuery:
    """A ready-to-execute union over `partitions`."""

    partitions: tuple[PartitionId, ...]
    sql: str

    @property
    def identifiers(self) -> list[str]:
        return [p.value for p in self.partitions]


class MergedQueryBuilder:
    """
    Usage:
        builder = MergedQueryBuilder()
        query = await builder.plan(catalog, window)
        if query is None:
            ...  # nothing hot, no engine round-trip needed
    """

    __slots__ = ("_table_name",)

    def __init__(self, table_name: str = C.PARTITION_TABLE) -> None:
        self._table_name = table_name

    def build(self, keys: Sequence[PartitionKey]) -> Optional[MergedQuery]:
        """Union over the given keys, or None if there are none."""
        partitions = tuple(key.identifier for key in sorted(set(keys)))
        if not partitions:
            return None

        sql = "\nUNION ALL\n".join(
            select_all_sql(partition, self._table_name) for partition in partitions
        )
        return MergedQuery(partitions=partitions, sql=sql)

    async def plan(
        self,
        catalog: PartitionCatalog,
        window: HotWindow,
    ) -> Optional[MergedQuery]:
        """Union over the catalog's partitions inside `window`."""
        return self.build(await catalog.hot_partitions(window))
