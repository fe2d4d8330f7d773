from __future__ import annotations

import json

import pytest
from sqlalchemy.exc import OperationalError

from taskmaster.domain.entities import SubTask, Task
from taskmaster.domain.enums import Category, Priority
from taskmaster.services.task_store import TaskStore

from conftest import STORAGE_KEY, FakeKV


def _task(**overrides) -> Task:
    data = {
        "id": "t1",
        "title": "Pay rent",
        "description": "",
        "priority": Priority.HIGH,
        "category": Category.FINANCE,
        "due_date": "2024-03-01",
        "created_at": 1_700_000_000_000,
    }
    data.update(overrides)
    return Task(**data)


def test_absent_key_loads_empty() -> None:
    store = TaskStore(FakeKV(), key=STORAGE_KEY)
    store.load()
    assert store.tasks == ()


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"id": "t1"}',
        '[{"id": "t1"}]',
        '[{"id": "t1", "title": "x", "priority": "Urgent", "category": "Work", "createdAt": 1}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": "soon"}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": 1, "subTasks": [5]}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": Infinity}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": NaN}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": 1e400}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": 1' + "0" * 400 + '}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": 1, "completed": "false"}]',
        '[{"id": "t1", "title": "  ", "priority": "Low", "category": "Work", "createdAt": 1}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": 1,'
        ' "subTasks": [{"id": "s1", "text": ""}]}]',
        '[{"id": "t1", "title": "x", "priority": "Low", "category": "Work", "createdAt": 1,'
        ' "subTasks": [{"id": "s1", "text": "a", "completed": 1}]}]',
    ],
)
def test_unreadable_payload_loads_empty(raw: str) -> None:
    store = TaskStore(FakeKV({STORAGE_KEY: raw}), key=STORAGE_KEY)
    store.load()
    assert store.tasks == ()


def test_persisted_layout_uses_display_labels() -> None:
    kv = FakeKV()
    store = TaskStore(kv, key=STORAGE_KEY)
    task = _task(sub_tasks=(SubTask(id="s1", text="Transfer", completed=True),))

    store.commit([task])

    payload = json.loads(kv.data[STORAGE_KEY])
    assert payload == [
        {
            "id": "t1",
            "title": "Pay rent",
            "description": "",
            "completed": False,
            "priority": "High",
            "category": "Finance",
            "dueDate": "2024-03-01",
            "createdAt": 1_700_000_000_000,
            "subTasks": [{"id": "s1", "text": "Transfer", "completed": True}],
        }
    ]


def test_reload_restores_committed_tasks() -> None:
    kv = FakeKV()
    first = TaskStore(kv, key=STORAGE_KEY)
    tasks = [_task(), _task(id="t2", due_date="", sub_tasks=(SubTask(id="s1", text="x"),))]
    first.commit(tasks)

    second = TaskStore(kv, key=STORAGE_KEY)
    second.load()

    assert second.tasks == tuple(tasks)


def test_missing_optional_fields_get_defaults() -> None:
    raw = json.dumps([
        {"id": "t1", "title": "x", "priority": "Low", "category": "Other", "createdAt": 5}
    ])
    store = TaskStore(FakeKV({STORAGE_KEY: raw}), key=STORAGE_KEY)
    store.load()

    (task,) = store.tasks
    assert task.description == ""
    assert task.due_date == ""
    assert task.completed is False
    assert task.sub_tasks == ()


def test_update_returning_none_skips_commit() -> None:
    kv = FakeKV()
    store = TaskStore(kv, key=STORAGE_KEY)

    assert store.update(lambda tasks: None) is False
    assert kv.writes == 0


class FailingKV(FakeKV):
    def set(self, key: str, value: str) -> None:
        raise OperationalError("UPDATE kv_store", {}, Exception("disk I/O error"))


def test_write_failure_keeps_memory_state() -> None:
    store = TaskStore(FailingKV(), key=STORAGE_KEY)
    notified: list[bool] = []
    store.subscribe(lambda: notified.append(True))

    store.commit([_task()])

    assert store.tasks == (_task(),)
    assert notified == [True]
