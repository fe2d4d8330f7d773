from __future__ import annotations

from dataclasses import dataclass

from .enums import Category, Priority


@dataclass(frozen=True)
class SubTask:
    id: str
    text: str
    completed: bool = False


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    description: str
    priority: Priority
    category: Category
    due_date: str
    created_at: int
    completed: bool = False
    sub_tasks: tuple[SubTask, ...] = ()


@dataclass(frozen=True)
class Quote:
    quote: str
    author: str
