from __future__ import annotations

from datetime import date

import pytest

from taskmaster.domain.enums import Category, Priority
from taskmaster.domain.filters import TaskFilters
from taskmaster.services.async_call import CallState


def test_create_task_prepends_and_persists(service, kv) -> None:
    task = service.create_task({
        "title": "Buy milk",
        "priority": Priority.MEDIUM,
        "category": Category.SHOPPING,
    })

    assert task is not None
    assert service.store.tasks == (task,)
    assert task.completed is False
    assert task.sub_tasks == ()
    assert service.list_tasks(TaskFilters())[0] == task
    stats = service.get_stats()
    assert (stats.total, stats.completed, stats.pending) == (1, 0, 1)
    assert kv.writes == 1


def test_create_task_uses_defaults(service) -> None:
    task = service.create_task({"title": "Plain", "due_date": date(2024, 3, 15)})

    assert task.priority == Priority.LOW
    assert task.category == Category.PERSONAL
    assert task.description == ""
    assert task.due_date == "2024-03-15"


def test_blank_title_is_rejected(service, kv) -> None:
    assert service.create_task({"title": "   "}) is None
    assert service.create_task({}) is None
    assert service.store.tasks == ()
    assert kv.writes == 0


def test_unknown_priority_raises(service) -> None:
    with pytest.raises(ValueError):
        service.create_task({"title": "x", "priority": "Urgent"})


def test_newest_task_listed_first(service) -> None:
    service.create_task({"title": "A"})
    service.create_task({"title": "B"})

    titles = [task.title for task in service.list_tasks(TaskFilters())]
    assert titles == ["B", "A"]
    assert [task.title for task in service.store.tasks] == ["B", "A"]


def test_toggle_complete_is_an_involution(service) -> None:
    task = service.create_task({"title": "Walk", "description": "30 min"})

    service.toggle_complete(task.id)
    toggled = service.get_task(task.id)
    assert toggled.completed is True
    assert toggled.title == "Walk"
    assert toggled.description == "30 min"
    assert toggled.created_at == task.created_at

    service.toggle_complete(task.id)
    assert service.get_task(task.id) == task


def test_toggle_complete_leaves_sub_tasks_alone(service) -> None:
    task = service.create_task({"title": "Plan trip"})
    service.apply_breakdown(task.id, ["Book flight", "Book hotel", "Pack"])

    service.toggle_complete(task.id)

    assert all(not sub_task.completed for sub_task in service.get_task(task.id).sub_tasks)


def test_unknown_ids_are_no_ops(service, kv) -> None:
    task = service.create_task({"title": "Only"})
    writes = kv.writes

    service.toggle_complete("missing")
    service.delete_task("missing")
    service.toggle_subtask(task.id, "missing")
    service.toggle_subtask("missing", "missing")
    assert service.apply_breakdown("missing", ["x"]) is False

    assert service.store.tasks == (task,)
    assert kv.writes == writes


def test_delete_task(service) -> None:
    first = service.create_task({"title": "First"})
    second = service.create_task({"title": "Second"})

    service.delete_task(first.id)

    assert service.store.tasks == (second,)
    assert service.get_task(first.id) is None


def test_apply_breakdown_keeps_order(service) -> None:
    task = service.create_task({"title": "Write report"})

    assert service.apply_breakdown(task.id, ["a", "b", "c"]) is True

    sub_tasks = service.get_task(task.id).sub_tasks
    assert [sub_task.text for sub_task in sub_tasks] == ["a", "b", "c"]
    assert all(not sub_task.completed for sub_task in sub_tasks)
    assert len({sub_task.id for sub_task in sub_tasks}) == 3


def test_toggle_subtask_preserves_order(service) -> None:
    task = service.create_task({"title": "Write report"})
    service.apply_breakdown(task.id, ["a", "b", "c"])
    middle = service.get_task(task.id).sub_tasks[1]

    service.toggle_subtask(task.id, middle.id)

    sub_tasks = service.get_task(task.id).sub_tasks
    assert [sub_task.text for sub_task in sub_tasks] == ["a", "b", "c"]
    assert [sub_task.completed for sub_task in sub_tasks] == [False, True, False]


def test_stale_breakdown_after_delete_does_nothing(service) -> None:
    task = service.create_task({"title": "Doomed"})
    service.apply_breakdown(task.id, ["a", "b", "c"])
    service.delete_task(task.id)

    assert service.apply_breakdown(task.id, ["a", "b", "c"]) is False
    assert service.store.tasks == ()


def test_store_notifies_subscribers(service) -> None:
    seen: list[int] = []
    unsubscribe = service.store.subscribe(lambda: seen.append(len(service.store.tasks)))

    service.create_task({"title": "One"})
    unsubscribe()
    service.create_task({"title": "Two"})

    assert seen == [1]


@pytest.mark.asyncio
async def test_request_breakdown_applies_steps(service, ai) -> None:
    task = service.create_task({"title": "Launch", "description": "v1"})
    observed: list[bool] = []
    ai.during_call = lambda: observed.append(service.thinking)

    steps = await service.request_breakdown(task.id)

    assert steps == ["a", "b", "c"]
    assert ai.calls == [("Launch", "v1")]
    assert observed == [True]
    assert service.thinking is False
    assert service.breakdown_call.state == CallState.SETTLED
    assert [sub_task.text for sub_task in service.get_task(task.id).sub_tasks] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_request_breakdown_for_deleted_task_settles(service, ai) -> None:
    task = service.create_task({"title": "Race"})
    ai.during_call = lambda: service.delete_task(task.id)

    steps = await service.request_breakdown(task.id)

    assert steps == []
    assert service.store.tasks == ()
    assert service.thinking is False
    assert service.breakdown_call.value == []


@pytest.mark.asyncio
async def test_request_breakdown_for_missing_task_clears_thinking(service, ai) -> None:
    assert service.breakdown_call.state == CallState.IDLE

    assert await service.request_breakdown("missing") == []

    assert ai.calls == []
    assert service.thinking is False
    assert service.breakdown_call.state == CallState.SETTLED


@pytest.mark.asyncio
async def test_daily_quote_settles_quote_call(service) -> None:
    quote = await service.daily_quote()

    assert quote.author == "Tester"
    assert service.quote_call.value == quote
    assert service.quote_call.state == CallState.SETTLED


@pytest.mark.asyncio
async def test_request_breakdown_keeps_existing_sub_tasks(service, ai) -> None:
    task = service.create_task({"title": "Trip"})
    service.apply_breakdown(task.id, ["mine-1", "mine-2", "mine-3"])
    ai.steps = ["x", "y", "z"]

    assert await service.request_breakdown(task.id) == []

    assert ai.calls == []
    assert [sub_task.text for sub_task in service.get_task(task.id).sub_tasks] == ["mine-1", "mine-2", "mine-3"]
    assert service.thinking is False
    assert service.breakdown_call.state == CallState.SETTLED


@pytest.mark.asyncio
async def test_request_breakdown_discarded_when_sub_tasks_appear_mid_call(service, ai) -> None:
    task = service.create_task({"title": "Move house"})
    ai.steps = ["x", "y", "z"]
    ai.during_call = lambda: service.apply_breakdown(task.id, ["Pack", "Rent van", "Unpack"])

    assert await service.request_breakdown(task.id) == []

    assert ai.calls == [("Move house", "")]
    assert [sub_task.text for sub_task in service.get_task(task.id).sub_tasks] == ["Pack", "Rent van", "Unpack"]
    assert service.thinking is False
    assert service.breakdown_call.value == []
