"""
Partition Schema: User Records and Per-Partition DDL

Every monthly partition holds exactly one table:

    users(id BIGINT, name TEXT NOT NULL, registered_date DATE NOT NULL)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from monthmesh.core import constants as C
from monthmesh.core.errors import InsertError
from monthmesh.core.types import Result, Ok, Err
from monthmesh.partition.keys import PartitionId

COLUMNS: tuple[str, ...] = ("id", "name", "registered_date")


@dataclass(frozen=True, slots=True)
class User:
    """Registered user. `registered_date` decides the partition."""

    id: int
    name: str
    registered_date: date

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> User:
        """Decode a (id, name, registered_date) row."""
        id_, name, registered_date = row
        return cls(id=int(id_), name=str(name), registered_date=registered_date)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Result[User, InsertError]:
        """
        Validate a JSON object into a User.

        Expected shape:
            {"id": 1, "name": "Alice", "registered_date": "2024-01-10"}
        """
        if not isinstance(data, Mapping):
            return Err(InsertError.validation_failed("body", data, "expected a JSON object"))

        for name in COLUMNS:
            if name not in data:
                return Err(InsertError.validation_failed(name, None, "field is required"))

        id_ = data["id"]
        if isinstance(id_, bool) or not isinstance(id_, int):
            return Err(InsertError.validation_failed("id", id_, "must be an integer"))
        if not -(2 ** 63) <= id_ < 2 ** 63:
            return Err(InsertError.validation_failed("id", id_, "out of int64 range"))

        name = data["name"]
        if not isinstance(name, str):
            return Err(InsertError.validation_failed("name", name, "must be a non-empty string"))
        reason = name_problem(name)
        if reason is not None:
            return Err(InsertError.validation_failed("name", name, reason))

        raw_date = data["registered_date"]
        if not isinstance(raw_date, str):
            return Err(InsertError.validation_failed(
                "registered_date", raw_date, "must be an ISO date string"
            ))
        try:
            registered_date = date.fromisoformat(raw_date)
        except ValueError as e:
            return Err(InsertError.validation_failed("registered_date", raw_date, str(e)))

        return Ok(cls(id=id_, name=name, registered_date=registered_date))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "registered_date": self.registered_date.isoformat(),
        }

    def to_params(self) -> list[Any]:
        """Positional insert parameters in column order."""
        return [self.id, self.name, self.registered_date]


def name_problem(name: str) -> Optional[str]:
    """Why `name` cannot be stored, or None if it can."""
    if not name:
        return "must be a non-empty string"
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates survive json.loads but DuckDB cannot bind them
        return "must be valid UTF-8 text"
    return None


def attach_sql(partition: PartitionId, path: str) -> str:
    """ATTACH the partition file under its identifier. The file is created if missing."""
    escaped = path.replace("'", "''")
    return f"ATTACH IF NOT EXISTS '{escaped}' AS {partition.database}"


def create_table_sql(partition: PartitionId, table_name: str = C.PARTITION_TABLE) -> str:
    return f"""
        CREATE TABLE IF NOT EXISTS {partition.table(table_name)} (
            id BIGINT,
            name TEXT NOT NULL,
            registered_date DATE NOT NULL
        )
    """


def insert_sql(partition: PartitionId, table_name: str = C.PARTITION_TABLE) -> str:
    return (
        f"INSERT INTO {partition.table(table_name)} (id, name, registered_date) "
        f"VALUES (?, ?, ?) RETURNING id, name, registered_date"
    )


def select_all_sql(partition: PartitionId, table_name: str = C.PARTITION_TABLE) -> str:
    return f"SELECT id, name, registered_date FROM {partition.table(table_name)}"
