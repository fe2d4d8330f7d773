from __future__ import annotations

from datetime import date

from taskmaster.domain.calendar import build_month_grid, days_in_month, shift_month
from taskmaster.domain.entities import Task
from taskmaster.domain.enums import Category, Priority


def _task(task_id: str, due_date: str) -> Task:
    return Task(
        id=task_id,
        title=task_id,
        description="",
        priority=Priority.LOW,
        category=Category.OTHER,
        due_date=due_date,
        created_at=0,
    )


def test_march_2024_geometry() -> None:
    grid = build_month_grid([], 2024, 3)

    # 2024-03-01 was a Friday
    assert grid.days_in_month == 31
    assert grid.leading_blanks == 5
    assert grid.title == "March 2024"


def test_sunday_start_has_no_leading_blanks() -> None:
    # 2023-10-01 was a Sunday
    assert build_month_grid([], 2023, 10).leading_blanks == 0


def test_cells_pad_to_full_weeks() -> None:
    grid = build_month_grid([], 2024, 3)
    cells = grid.cells()

    assert len(cells) % 7 == 0
    assert cells[:5] == [None] * 5
    assert cells[5] == 1
    assert [cell for cell in cells if cell is not None] == list(range(1, 32))


def test_tasks_land_only_on_their_exact_day() -> None:
    due = _task("due", "2024-03-15")
    other = _task("other", "2024-04-15")
    undated = _task("undated", "")
    partial = _task("partial", "2024-3-15")
    tasks = [due, other, undated, partial]

    march = build_month_grid(tasks, 2024, 3)
    assert march.tasks_on(15) == [due]
    assert sum(len(bucket) for bucket in march.tasks_by_day.values()) == 1

    april = build_month_grid(tasks, 2024, 4)
    assert april.tasks_on(15) == [other]
    assert due not in [task for bucket in april.tasks_by_day.values() for task in bucket]


def test_leap_february() -> None:
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2023, 12) == 31


def test_is_today_compares_full_date() -> None:
    grid = build_month_grid([], 2024, 3)

    assert grid.is_today(15, today=date(2024, 3, 15))
    assert not grid.is_today(15, today=date(2025, 3, 15))
    assert not grid.is_today(14, today=date(2024, 3, 15))
    assert grid.date_key(5) == "2024-03-05"


def test_shift_month_wraps_years() -> None:
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 3, 0) == (2024, 3)
