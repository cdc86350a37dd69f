# src/todo_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

MAX_CONTENT_LENGTH = 200


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Derived from the stored `done` flag; it is not persisted on its own.
    """

    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(slots=True)
class Task:
    id: int
    content: str
    done: bool
    created_at: str
    completed_at: str | None = None

    @property
    def status(self) -> TaskStatus:
        return TaskStatus.COMPLETED if self.done else TaskStatus.PENDING

    def matches(self, content: str) -> bool:
        """Case-insensitive content comparison used for duplicate detection."""
        return self.content.casefold() == content.casefold()

    def mark_done(self, ts: str) -> None:
        self.done = True
        self.completed_at = ts

    def mark_pending(self) -> None:
        self.done = False
        self.completed_at = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "done": self.done,
            "created_at": self.created_at,
        }
        if self.completed_at:
            data["completed_at"] = self.completed_at
        return data


@dataclass(slots=True)
class TaskCollection:
    """
    Ordered tasks plus the id counter, as persisted.

    Invariant: next_id > max(task ids). Ids come from the counter only and are
    never reused; clear() is the one place the counter goes back to 1.
    """

    tasks: list[Task] = field(default_factory=list)
    next_id: int = 1

    def __len__(self) -> int:
        return len(self.tasks)

    def allocate_id(self) -> int:
        task_id = self.next_id
        self.next_id += 1
        return task_id

    def find(self, task_id: int) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def find_duplicate(self, content: str, *, exclude_id: int | None = None) -> Task | None:
        for task in self.tasks:
            if task.id != exclude_id and task.matches(content):
                return task
        return None

    def remove(self, task_id: int) -> Task | None:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return self.tasks.pop(index)
        return None

    def clear(self) -> None:
        self.tasks = []
        self.next_id = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "next_id": self.next_id,
        }
