from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .entities import Task
from .enums import Category, Priority


@dataclass(frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    priority_breakdown: dict[Priority, int]
    category_breakdown: dict[Category, int]

    @property
    def completion_rate(self) -> int:
        return round(self.completed / (self.total or 1) * 100)

    @property
    def urgent(self) -> int:
        return self.priority_breakdown[Priority.HIGH]


def compute_stats(tasks: Sequence[Task]) -> TaskStats:
    priority_breakdown = {priority: 0 for priority in Priority}
    category_breakdown = {category: 0 for category in Category}
    completed = 0
    for task in tasks:
        priority_breakdown[task.priority] += 1
        category_breakdown[task.category] += 1
        if task.completed:
            completed += 1

    total = len(tasks)
    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        priority_breakdown=priority_breakdown,
        category_breakdown=category_breakdown,
    )


def subtask_progress(task: Task) -> tuple[int, int]:
    done = sum(1 for sub_task in task.sub_tasks if sub_task.completed)
    return done, len(task.sub_tasks)
