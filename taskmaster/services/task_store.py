from __future__ import annotations

import json
import logging
import math
import threading
from collections.abc import Callable, Sequence
from typing import Any, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from taskmaster.config import SETTINGS
from taskmaster.domain.entities import SubTask, Task
from taskmaster.domain.enums import Category, Priority

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


def _subtask_to_payload(sub_task: SubTask) -> dict[str, Any]:
    return {"id": sub_task.id, "text": sub_task.text, "completed": sub_task.completed}


def _to_payload(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "completed": task.completed,
        "priority": task.priority.value,
        "category": task.category.value,
        "dueDate": task.due_date,
        "createdAt": task.created_at,
        "subTasks": [_subtask_to_payload(sub_task) for sub_task in task.sub_tasks],
    }


def _require(raw: dict, key: str, kind: type) -> Any:
    value = raw[key]
    if not isinstance(value, kind):
        raise TypeError(f"{key} must be {kind.__name__}")
    return value


def _require_text(raw: dict, key: str) -> str:
    value = _require(raw, key, str)
    if not value.strip():
        raise ValueError(f"{key} must not be blank")
    return value


def _optional_str(raw: dict, key: str) -> str:
    value = raw.get(key) or ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be str")
    return value


def _optional_bool(raw: dict, key: str) -> bool:
    value = raw.get(key, False)
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be bool")
    return value


def _to_entity(raw: dict) -> Task:
    created_at = raw["createdAt"]
    if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
        raise TypeError("createdAt must be a number")
    # json accepts Infinity, NaN and 1e400
    if not math.isfinite(created_at):
        raise ValueError("createdAt must be finite")
    return Task(
        id=_require(raw, "id", str),
        title=_require_text(raw, "title"),
        description=_optional_str(raw, "description"),
        completed=_optional_bool(raw, "completed"),
        priority=Priority(raw["priority"]),
        category=Category(raw["category"]),
        due_date=_optional_str(raw, "dueDate"),
        created_at=int(created_at),
        sub_tasks=tuple(
            SubTask(
                id=_require(item, "id", str),
                text=_require_text(item, "text"),
                completed=_optional_bool(item, "completed"),
            )
            for item in raw.get("subTasks") or []
        ),
    )


def dumps_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([_to_payload(task) for task in tasks], ensure_ascii=False)


def loads_tasks(text: str) -> list[Task]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise TypeError("stored tasks must be a JSON array")
    return [_to_entity(item) for item in data]


class TaskStore:
    """Owns the canonical task list and writes it through to a key-value store."""

    def __init__(self, kv: KeyValueStore, key: str = SETTINGS.storage_key) -> None:
        self._kv = kv
        self._key = key
        self._tasks: tuple[Task, ...] = ()
        self._lock = threading.RLock()
        self._subscribers: list[Callable[[], None]] = []

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def load(self) -> None:
        raw = self._kv.get(self._key)
        if raw is None:
            self._tasks = ()
            return
        try:
            self._tasks = tuple(loads_tasks(raw))
        except (ValueError, TypeError, KeyError, AttributeError, OverflowError) as exc:
            logger.warning("Stored tasks under %r are unreadable, starting empty: %s", self._key, exc)
            self._tasks = ()
            return
        logger.info("Loaded %d tasks", len(self._tasks))

    def commit(self, tasks: Sequence[Task]) -> None:
        with self._lock:
            self._tasks = tuple(tasks)
            try:
                self._kv.set(self._key, dumps_tasks(self._tasks))
            except SQLAlchemyError:
                logger.exception("Failed to persist %d tasks", len(self._tasks))
        self._notify()

    def update(self, fn: Callable[[tuple[Task, ...]], Optional[Sequence[Task]]]) -> bool:
        """Apply ``fn`` to the current snapshot and commit what it returns.

        ``fn`` returns ``None`` when there is nothing to change; no commit happens then.
        """
        with self._lock:
            updated = fn(self._tasks)
            if updated is None:
                return False
            self.commit(updated)
            return True

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback()
