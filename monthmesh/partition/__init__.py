"""
Partition module: monthly keys, the hot window and the attached-partition catalog.
"""

from monthmesh.partition.keys import (
    PartitionKey,
    PartitionId,
    key_of,
    identifier_of,
    parse_identifier,
    parse_filename,
)
from monthmesh.partition.window import HotWindow, hot_window
from monthmesh.partition.catalog import PartitionCatalog, scan_partition_dir

__all__ = [
    "PartitionKey",
    "PartitionId",
    "key_of",
    "identifier_of",
    "parse_identifier",
    "parse_filename",
    "HotWindow",
    "hot_window",
    "PartitionCatalog",
    "scan_partition_dir",
]
