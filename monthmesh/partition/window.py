"""
Hot Window: Rolling Range of Recent Months

The hot window is recomputed from "today" on every call. With the
default of 12 months and today = 2024-06-15 the window is
[2023-06-01, 2024-06-30]: the current month plus the 12 before it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from dateutil.relativedelta import relativedelta

from monthmesh.core import constants as C
from monthmesh.partition.keys import PartitionKey


@dataclass(frozen=True, slots=True)
class HotWindow:
    """Inclusive date range [start, end]."""

    start: date
    end: date

    def contains(self, key: PartitionKey) -> bool:
        """A partition is hot iff its first day lies inside the window."""
        return self.start <= key.start <= self.end

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()}]"


def hot_window(today: date, months: int = C.WINDOW_MONTHS) -> HotWindow:
    """
    Compute the window for the given day.

    start: first day of the month `months` months before today's month
    end:   last day of today's month
    """
    if months < 0:
        raise ValueError(f"months must be >= 0, got {months}")
    first_of_month = today.replace(day=1)
    return HotWindow(
        start=first_of_month - relativedelta(months=months),
        end=first_of_month + relativedelta(months=1, days=-1),
    )
