# src/todo_tracker/core/ports.py

"""
Ports (interfaces) used by the CLI shell.

Command handlers depend on this Protocol rather than on TaskStore directly,
so tests can swap in an in-memory or failing repository.
"""

from __future__ import annotations

from typing import Protocol

from ..tasks.task_models import TaskCollection


class TaskRepo(Protocol):
    """Whole-collection load/save boundary (see tasks.task_store.TaskStore)."""

    def load(self) -> TaskCollection: ...
    def save(self, collection: TaskCollection) -> None: ...
