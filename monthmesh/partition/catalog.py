"""
Partition Catalog: Attached Partitions of the Active Session

Tracks which monthly partitions are attached to the engine:
- Populated at startup from a directory listing
- Updated after each successful attach
- Queried by the merged-query builder for hot partitions

All mutation happens under the catalog lock. The attach manager holds
the same lock across check, attach and record so that two callers can
never both attach the same month.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Iterator

from monthmesh.core import constants as C
from monthmesh.partition.keys import PartitionKey, parse_filename
from monthmesh.partition.window import HotWindow

logger = logging.getLogger(__name__)


class PartitionCatalog:
    """
    In-process set of attached partition keys.

    Usage:
        catalog = PartitionCatalog()

        async with catalog.lock:
            if key not in catalog:
                ...  # attach
                catalog.record(key)

        hot = await catalog.hot_partitions(window)
    """

    __slots__ = ("_keys", "_lock")

    def __init__(self, keys: Iterable[PartitionKey] = ()) -> None:
        self._keys: set[PartitionKey] = set(keys)
        self._lock = asyncio.Lock()

    @property
    def lock(self) -> asyncio.Lock:
        """Exclusive-access lock guarding check-then-attach sequences."""
        return self._lock

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[PartitionKey]:
        return iter(sorted(self._keys))

    def record(self, key: PartitionKey) -> bool:
        """
        Mark a partition attached. Caller must hold the lock.

        Returns False if it was already recorded.
        """
        if key in self._keys:
            return False
        self._keys.add(key)
        return True

    async def snapshot(self) -> list[PartitionKey]:
        """All attached keys in ascending order."""
        async with self._lock:
            return sorted(self._keys)

    async def hot_partitions(self, window: HotWindow) -> list[PartitionKey]:
        """Attached keys inside the window, ascending."""
        async with self._lock:
            return sorted(k for k in self._keys if window.contains(k))


def scan_partition_dir(
    directory: Path,
    suffix: str = C.PARTITION_SUFFIX,
) -> list[PartitionKey]:
    """
    List partition files in `directory`, creating it if missing.

    Entries whose names do not parse as YYYYMM<suffix> are skipped
    and logged.
    """
    directory.mkdir(parents=True, exist_ok=True)

    keys: set[PartitionKey] = set()
    for entry in sorted(directory.iterdir()):
        if not entry.is_file():
            continue
        key = parse_filename(entry, suffix)
        if key is None:
            # DuckDB write-ahead logs sit next to partition files
            if not entry.name.endswith(f"{suffix}.wal"):
                logger.warning(
                    "Skipping unrecognized file in partition directory",
                    extra={"path": str(entry)},
                )
            continue
        keys.add(key)

    logger.info(
        "Partition directory scanned",
        extra={"directory": str(directory), "partitions": len(keys)},
    )
    return sorted(keys)
