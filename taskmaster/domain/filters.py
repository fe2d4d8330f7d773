from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .entities import Task
from .enums import ALL


@dataclass(frozen=True)
class TaskFilters:
    category: str = ALL
    priority: str = ALL
    search: str = ""

    @property
    def is_default(self) -> bool:
        return self.category == ALL and self.priority == ALL and not self.search


def _matches(task: Task, filters: TaskFilters, needle: str) -> bool:
    if filters.category != ALL and task.category != filters.category:
        return False
    if filters.priority != ALL and task.priority != filters.priority:
        return False
    if needle:
        return needle in task.title.lower() or needle in task.description.lower()
    return True


def apply_filters(tasks: Iterable[Task], filters: TaskFilters) -> list[Task]:
    """Tasks passing ``filters``, newest first.

    The sort is stable, so tasks sharing a ``created_at`` keep their list order.
    """
    needle = filters.search.lower()
    matched = [task for task in tasks if _matches(task, filters, needle)]
    return sorted(matched, key=lambda task: task.created_at, reverse=True)
