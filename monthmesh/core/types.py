"""
Result Container and Timestamps

Every fallible operation in MonthMesh (attach, insert, hot listing, config
loading) returns Ok or Err instead of raising across layers; the HTTP
handlers turn an Err into a 400 carrying the error text.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Literal, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped success type


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying `value`."""

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed outcome carrying `error`, usually a MonthMeshError."""

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """
        Raises:
            RuntimeError: always; check is_err() first
        """
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        return self


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True, slots=True, order=True)
class Timestamp:
    """Wall-clock nanoseconds since the Unix epoch, stamped on every error."""

    nanos: int

    @classmethod
    def now(cls) -> Timestamp:
        return cls(nanos=time.time_ns())
