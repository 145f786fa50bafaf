"""
Unit Tests: Partition Catalog

Tests:
    - Recording keys is idempotent
    - Hot partitions are filtered and ordered
    - Directory scan keeps valid partition files and skips the rest
"""

import asyncio
import logging
from datetime import date

from monthmesh.partition.catalog import PartitionCatalog, scan_partition_dir
from monthmesh.partition.keys import key_of
from monthmesh.partition.window import hot_window


class TestPartitionCatalog:
    """Tests for the in-process catalog."""

    def test_record_once(self):
        catalog = PartitionCatalog()
        key = key_of(date(2024, 1, 10))

        assert catalog.record(key) is True
        assert catalog.record(key_of(date(2024, 1, 31))) is False
        assert key in catalog
        assert len(catalog) == 1

    def test_hot_partitions_sorted(self):
        catalog = PartitionCatalog([
            key_of(date(2024, 5, 1)),
            key_of(date(2022, 1, 10)),
            key_of(date(2023, 6, 1)),
            key_of(date(2024, 1, 10)),
            key_of(date(2024, 7, 1)),
        ])
        window = hot_window(date(2024, 6, 1))

        hot = asyncio.run(catalog.hot_partitions(window))

        assert [str(k) for k in hot] == ["2023-06", "2024-01", "2024-05"]

    def test_snapshot_includes_cold(self):
        catalog = PartitionCatalog([key_of(date(2024, 1, 1)), key_of(date(2020, 1, 1))])
        assert [str(k) for k in asyncio.run(catalog.snapshot())] == ["2020-01", "2024-01"]


class TestScanPartitionDir:
    """Tests for the startup directory scan."""

    def test_creates_missing_directory(self, tmp_path):
        directory = tmp_path / "a" / "b"
        assert scan_partition_dir(directory) == []
        assert directory.is_dir()

    def test_valid_and_invalid_entries(self, tmp_path, caplog):
        for name in ("202401.db", "202312.db", "202401.db.wal", "202413.db", "notes.txt"):
            (tmp_path / name).write_bytes(b"")
        (tmp_path / "202402.db").mkdir()

        with caplog.at_level(logging.WARNING, logger="monthmesh.partition.catalog"):
            keys = scan_partition_dir(tmp_path)

        assert [str(k) for k in keys] == ["2023-12", "2024-01"]
        skipped = {r.path for r in caplog.records if hasattr(r, "path")}
        assert skipped == {str(tmp_path / "202413.db"), str(tmp_path / "notes.txt")}
