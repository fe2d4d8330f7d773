from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from .entities import Task

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


@dataclass(frozen=True)
class MonthGrid:
    """One displayed month laid out on a Sunday-first, 7-column grid."""

    year: int
    month: int
    days_in_month: int
    leading_blanks: int
    tasks_by_day: dict[int, list[Task]] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    def date_key(self, day: int) -> str:
        return f"{self.year:04d}-{self.month:02d}-{day:02d}"

    def tasks_on(self, day: int) -> list[Task]:
        return self.tasks_by_day.get(day, [])

    def cells(self) -> list[Optional[int]]:
        cells: list[Optional[int]] = [None] * self.leading_blanks
        cells.extend(range(1, self.days_in_month + 1))
        trailing = -len(cells) % 7
        cells.extend([None] * trailing)
        return cells

    def is_today(self, day: int, today: date | None = None) -> bool:
        today = today or date.today()
        return (today.year, today.month, today.day) == (self.year, self.month, day)


def build_month_grid(tasks: Iterable[Task], year: int, month: int) -> MonthGrid:
    days = days_in_month(year, month)
    # date.weekday() is Monday=0; the grid starts on Sunday
    leading = (date(year, month, 1).weekday() + 1) % 7

    prefix = f"{year:04d}-{month:02d}-"
    buckets: dict[int, list[Task]] = {day: [] for day in range(1, days + 1)}
    keys = {f"{prefix}{day:02d}": day for day in buckets}
    for task in tasks:
        day = keys.get(task.due_date)
        if day is not None:
            buckets[day].append(task)

    return MonthGrid(
        year=year,
        month=month,
        days_in_month=days,
        leading_blanks=leading,
        tasks_by_day=buckets,
    )


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def days_in_month(year: int, month: int) -> int:
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return (next_month - timedelta(days=1)).day
