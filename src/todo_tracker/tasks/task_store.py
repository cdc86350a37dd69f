# src/todo_tracker/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .task_models import Task, TaskCollection

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for fatal storage failures."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class StorageIOError(StoreError):
    """The task file could not be read or written (permissions, disk, ...)."""

    def __init__(self, path: Path, cause: OSError) -> None:
        reason = cause.strerror or str(cause)
        super().__init__(path, f"cannot access task file {path}: {reason}")
        self.cause = cause


class CorruptStoreError(StoreError):
    """The task file exists but its content is not a valid task collection."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(path, f"task file {path} is corrupt: {reason}")
        self.reason = reason


def _pick(raw: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    for name in names:
        if name in raw:
            return raw[name]
    return default


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _dict_to_task(raw: Any, index: int) -> Task:
    if not isinstance(raw, dict):
        raise ValueError(f"tasks[{index}] is not an object")

    task_id = raw.get("id")
    if not _is_int(task_id) or task_id < 1:
        raise ValueError(f"tasks[{index}].id must be a positive integer")

    content = raw.get("content")
    if not isinstance(content, str):
        raise ValueError(f"tasks[{index}].content must be a string")

    done = raw.get("done", False)
    if not isinstance(done, bool):
        raise ValueError(f"tasks[{index}].done must be a boolean")

    created_at = _pick(raw, "created_at", "createdAt")
    if created_at is not None and not isinstance(created_at, str):
        raise ValueError(f"tasks[{index}].created_at must be a string")

    completed_at = _pick(raw, "completed_at", "completedAt")
    if completed_at is not None and not isinstance(completed_at, str):
        raise ValueError(f"tasks[{index}].completed_at must be a string")

    return Task(
        id=task_id,
        content=content,
        done=done,
        created_at=created_at or "",
        # A pending task never carries a completion time.
        completed_at=(completed_at or None) if done else None,
    )


def serialize_collection(collection: TaskCollection) -> str:
    """Pretty-printed JSON document for the whole collection."""
    return json.dumps(collection.to_dict(), ensure_ascii=False, indent=2) + "\n"


def parse_collection(text: str, *, source: Path | str = "<memory>") -> TaskCollection:
    """
    Build a TaskCollection from JSON text.

    Unknown fields are ignored. A missing or stale next_id is repaired to
    max(id) + 1 so that ids are never reused.
    """
    path = Path(source)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptStoreError(path, f"invalid JSON ({e})") from e
    except RecursionError as e:
        raise CorruptStoreError(path, "JSON nested too deeply") from e

    if not isinstance(data, dict):
        raise CorruptStoreError(path, "top-level value must be an object")

    raw_tasks = data.get("tasks")
    if raw_tasks is None:
        raw_tasks = []
    if not isinstance(raw_tasks, list):
        raise CorruptStoreError(path, "'tasks' must be a list")

    try:
        tasks = [_dict_to_task(raw, i) for i, raw in enumerate(raw_tasks)]
    except ValueError as e:
        raise CorruptStoreError(path, str(e)) from e

    seen: set[int] = set()
    for task in tasks:
        if task.id in seen:
            raise CorruptStoreError(path, f"duplicate task id {task.id}")
        seen.add(task.id)

    next_id = _pick(data, "next_id", "nextId")
    if next_id is not None and not _is_int(next_id):
        raise CorruptStoreError(path, "'next_id' must be an integer")

    floor = max(seen, default=0) + 1
    if next_id is None or next_id < floor:
        if next_id is not None or tasks:
            logger.warning("Repairing next_id in %s: %s -> %s", path, next_id, floor)
        next_id = floor

    return TaskCollection(tasks=tasks, next_id=next_id)


class TaskStore:
    """
    JSON file task store.

    The whole collection is read on load() and rewritten on save(); there is
    no partial update. save() writes a sibling temp file and moves it into
    place, so a failed write leaves the previous file intact.

    No locking: concurrent invocations on one file are last-writer-wins.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        logger.debug("TaskStore ready path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> TaskCollection:
        try:
            text = self._path.read_text("utf-8")
        except FileNotFoundError:
            logger.info("No task file at %s; starting with an empty list.", self._path)
            return TaskCollection()
        except UnicodeDecodeError as e:
            raise CorruptStoreError(self._path, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise StorageIOError(self._path, e) from e

        collection = parse_collection(text, source=self._path)
        logger.debug(
            "Loaded %d tasks from %s (next_id=%s)", len(collection), self._path, collection.next_id
        )
        return collection

    def save(self, collection: TaskCollection) -> None:
        payload = serialize_collection(collection)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageIOError(self._path, e) from e

        logger.debug(
            "Saved %d tasks to %s (next_id=%s)", len(collection), self._path, collection.next_id
        )
