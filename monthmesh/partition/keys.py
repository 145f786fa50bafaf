"""
Partition Keys: Monthly Partition Addressing

Maps calendar dates to monthly partition keys and keys to the
canonical six-digit identifier (YYYYMM) used both as the partition
file stem and as the attached database name.

PartitionId is the only string that is ever interpolated into SQL
as a database name. It can only be built from a PartitionKey or by
parsing a string that passes the same fixed-format validation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Union

from monthmesh.core import constants as C

_IDENTIFIER_RE = re.compile(r"[0-9]{6}")


@dataclass(frozen=True, slots=True, order=True)
class PartitionKey:
    """
    A calendar month, stored as its first day.

    Ordering follows calendar order. Two dates in the same month
    always produce equal keys.
    """

    start: date

    def __post_init__(self) -> None:
        if self.start.day != 1:
            raise ValueError(f"PartitionKey must start on day 1, got {self.start}")

    @classmethod
    def of(cls, value: date) -> PartitionKey:
        """Normalize any date to the key of its month."""
        return cls(start=value.replace(day=1))

    @property
    def year(self) -> int:
        return self.start.year

    @property
    def month(self) -> int:
        return self.start.month

    @property
    def day(self) -> int:
        return self.start.day

    @property
    def identifier(self) -> PartitionId:
        return PartitionId(f"{self.start.year:04d}{self.start.month:02d}")

    def __str__(self) -> str:
        return self.start.strftime("%Y-%m")


@dataclass(frozen=True, slots=True, order=True)
class PartitionId:
    """
    Validated partition identifier: exactly six ASCII digits, YYYYMM,
    with a month in 1..12 and a year >= 1.

    Raises ValueError on construction from anything else.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _IDENTIFIER_RE.fullmatch(self.value):
            raise ValueError(f"Invalid partition identifier {self.value!r}")
        year, month = int(self.value[:4]), int(self.value[4:])
        if year < 1 or not 1 <= month <= 12:
            raise ValueError(f"Invalid partition identifier {self.value!r}")

    @property
    def key(self) -> PartitionKey:
        return PartitionKey(start=date(int(self.value[:4]), int(self.value[4:]), 1))

    @property
    def database(self) -> str:
        """Quoted database name for SQL text."""
        return f'"{self.value}"'

    def table(self, table_name: str = C.PARTITION_TABLE) -> str:
        """Qualified table reference inside this partition."""
        return f"{self.database}.{table_name}"

    def __str__(self) -> str:
        return self.value


def key_of(value: date) -> PartitionKey:
    """Partition key for a record date."""
    return PartitionKey.of(value)


def identifier_of(key: PartitionKey) -> PartitionId:
    return key.identifier


def parse_identifier(value: str) -> Optional[PartitionKey]:
    """
    Inverse of identifier_of.

    Returns None for wrong length, non-digit characters or an
    invalid month instead of raising.
    """
    if not isinstance(value, str) or len(value) != C.PARTITION_ID_LENGTH:
        return None
    try:
        return PartitionId(value).key
    except ValueError:
        return None


def parse_filename(
    path: Union[str, Path],
    suffix: str = C.PARTITION_SUFFIX,
) -> Optional[PartitionKey]:
    """Parse a partition file name such as ``202403.db``."""
    name = Path(path).name
    if not name.endswith(suffix):
        return None
    return parse_identifier(name[: -len(suffix)])
