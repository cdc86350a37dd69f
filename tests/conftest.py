# tests/conftest.py

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_tracker.core.state import AppState
from todo_tracker.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="CRITICAL",
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.json",
        log_path=tmp_path / "app.log",
    )


@pytest.fixture()
def clock():
    """Deterministic clock: 2026-10-18 09:00:00, 09:00:01, ..."""
    counter = itertools.count()

    def _now() -> str:
        return f"2026-10-18 09:00:{next(counter):02d}"

    return _now


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_path)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, clock) -> AppState:
    """AppState wired with the real JSON store on tmp_path and a fixed clock."""
    return AppState(settings=settings, task_store=store, clock=clock)


@pytest.fixture()
def restore_root_logging():
    """setup_logging() replaces root handlers; put the originals back afterwards."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for h in list(root.handlers):
        if h not in saved_handlers:
            root.removeHandler(h)
            h.close()
    for h in saved_handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(saved_level)
    logging.captureWarnings(False)
