from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date

from taskmaster.domain.calendar import MonthGrid, build_month_grid
from taskmaster.domain.entities import Quote, SubTask, Task
from taskmaster.domain.enums import Category, Priority
from taskmaster.domain.filters import TaskFilters, apply_filters
from taskmaster.domain.stats import TaskStats, compute_stats

from .ai_service import FALLBACK_QUOTE, AIService
from .async_call import AsyncCall
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return uuid.uuid4().hex


class TaskService:
    def __init__(
        self,
        store: TaskStore,
        ai: AIService,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._ai = ai
        self._clock = clock
        self._new_id = id_factory
        self.breakdown_call: AsyncCall[list[str]] = AsyncCall()
        self.quote_call: AsyncCall[Quote] = AsyncCall()

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def thinking(self) -> bool:
        return self.breakdown_call.pending

    def get_task(self, task_id: str) -> Task | None:
        return next((task for task in self._store.tasks if task.id == task_id), None)

    def list_tasks(self, filters: TaskFilters) -> list[Task]:
        return apply_filters(self._store.tasks, filters)

    def get_stats(self) -> TaskStats:
        return compute_stats(self._store.tasks)

    def get_month(self, year: int, month: int) -> MonthGrid:
        return build_month_grid(self._store.tasks, year, month)

    def create_task(self, data: dict) -> Task | None:
        title = (data.get("title") or "").strip()
        if not title:
            return None

        normalized = self._normalize_data(data)
        task = Task(
            id=self._new_id(),
            title=title,
            description=normalized["description"],
            priority=normalized["priority"],
            category=normalized["category"],
            due_date=normalized["due_date"],
            created_at=self._clock(),
        )
        self._store.update(lambda tasks: [task, *tasks])
        logger.info("Created task %s", task.id)
        return task

    def toggle_complete(self, task_id: str) -> None:
        self._update_task(task_id, lambda task: replace(task, completed=not task.completed))

    def delete_task(self, task_id: str) -> None:
        def remove(tasks: tuple[Task, ...]) -> list[Task] | None:
            remaining = [task for task in tasks if task.id != task_id]
            return remaining if len(remaining) != len(tasks) else None

        if self._store.update(remove):
            logger.info("Deleted task %s", task_id)

    def toggle_subtask(self, task_id: str, subtask_id: str) -> None:
        def flip(task: Task) -> Task | None:
            if not any(sub_task.id == subtask_id for sub_task in task.sub_tasks):
                return None
            return replace(
                task,
                sub_tasks=tuple(
                    replace(sub_task, completed=not sub_task.completed)
                    if sub_task.id == subtask_id
                    else sub_task
                    for sub_task in task.sub_tasks
                ),
            )

        self._update_task(task_id, flip)

    def apply_breakdown(self, task_id: str, texts: Sequence[str]) -> bool:
        sub_tasks = tuple(SubTask(id=self._new_id(), text=text) for text in texts)
        return self._update_task(task_id, lambda task: replace(task, sub_tasks=sub_tasks))

    async def request_breakdown(self, task_id: str) -> list[str]:
        """
        Ask the AI service for sub-steps and attach them to the task.

        Only a task without sub-tasks is broken down; existing sub-tasks are
        never replaced, also when they appear while the request is running.
        The thinking flag is raised for the whole call and always cleared.
        Returns the steps that were applied (empty if nothing was applied).
        """
        self.breakdown_call.begin()
        steps: list[str] = []
        try:
            task = self.get_task(task_id)
            if task is None or task.sub_tasks:
                return steps
            steps = await self._ai.breakdown(task.title, task.description)
            sub_tasks = tuple(SubTask(id=self._new_id(), text=text) for text in steps)

            def attach(current: Task) -> Task | None:
                if current.sub_tasks:
                    return None
                return replace(current, sub_tasks=sub_tasks)

            if not self._update_task(task_id, attach):
                logger.info("Breakdown for task %s discarded, task removed or already split", task_id)
                steps = []
            return steps
        finally:
            self.breakdown_call.settle(steps)

    async def daily_quote(self) -> Quote:
        self.quote_call.begin()
        quote = None
        try:
            quote = await self._ai.daily_quote()
            return quote
        finally:
            self.quote_call.settle(quote or FALLBACK_QUOTE)

    def _update_task(self, task_id: str, change: Callable[[Task], Task | None]) -> bool:
        def apply(tasks: tuple[Task, ...]) -> list[Task] | None:
            for index, task in enumerate(tasks):
                if task.id != task_id:
                    continue
                updated = change(task)
                if updated is None:
                    return None
                return [*tasks[:index], updated, *tasks[index + 1:]]
            return None

        return self._store.update(apply)

    def _normalize_data(self, data: dict) -> dict:
        due = data.get("due_date") or ""
        if isinstance(due, date):
            due = due.isoformat()
        return {
            "description": data.get("description") or "",
            "priority": Priority(data.get("priority") or Priority.LOW),
            "category": Category(data.get("category") or Category.PERSONAL),
            "due_date": due.strip(),
        }
