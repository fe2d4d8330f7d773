from __future__ import annotations

import itertools
from collections.abc import Callable

import pytest

from taskmaster.domain.entities import Quote
from taskmaster.services.task_service import TaskService
from taskmaster.services.task_store import TaskStore

STORAGE_KEY = "test_tasks"


class FakeKV:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes += 1


class FakeAI:
    """Deterministic stand-in for AIService; ``during_call`` runs mid-request."""

    def __init__(self, steps: list[str] | None = None) -> None:
        self.steps = steps if steps is not None else ["a", "b", "c"]
        self.calls: list[tuple[str, str]] = []
        self.during_call: Callable[[], None] | None = None

    async def breakdown(self, title: str, description: str) -> list[str]:
        self.calls.append((title, description))
        if self.during_call:
            self.during_call()
        return list(self.steps)

    async def daily_quote(self) -> Quote:
        return Quote(quote="Keep going.", author="Tester")


@pytest.fixture()
def kv() -> FakeKV:
    return FakeKV()


@pytest.fixture()
def store(kv: FakeKV) -> TaskStore:
    store = TaskStore(kv, key=STORAGE_KEY)
    store.load()
    return store


@pytest.fixture()
def ai() -> FakeAI:
    return FakeAI()


@pytest.fixture()
def service(store: TaskStore, ai: FakeAI) -> TaskService:
    clock = itertools.count(1_700_000_000_000, 1000)
    ids = itertools.count(1)
    return TaskService(
        store,
        ai,
        clock=lambda: next(clock),
        id_factory=lambda: f"id-{next(ids)}",
    )
