# src/todo_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_list import Clock, now_local
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings kept on the state so handlers can read paths/app name.
    settings: object

    task_store: TaskRepo
    clock: Clock = now_local
