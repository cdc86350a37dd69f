# src/todo_tracker/tasks/task_list.py

"""
Task list operations.

Every operation takes the loaded TaskCollection, mutates it in place and
returns an Outcome. Lookup and validation problems are reported through the
Outcome (nothing is raised and nothing is mutated); only the store raises.

Content rules, checked in this order for both add and edit:
1. surrounding whitespace is stripped; empty -> EMPTY_CONTENT
2. longer than MAX_CONTENT_LENGTH code points -> TOO_LONG
3. equal (case-insensitive) to another task's content -> DUPLICATE
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from datetime import datetime

from .outcome import ErrorKind, Outcome
from .task_models import MAX_CONTENT_LENGTH, Task, TaskCollection

Clock = Callable[[], str]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
EMPTY_LIST_MESSAGE = "Task list is empty"

_ID_RE = re.compile(r"[0-9]+")


def now_local() -> str:
    return datetime.now().astimezone().strftime(TIMESTAMP_FORMAT)


def parse_task_id(raw: str | int) -> int | None:
    """Return the id as int, or None if it is not a non-negative base-10 integer."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    text = str(raw).strip()
    if not _ID_RE.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        # past sys.get_int_max_str_digits()
        return None


def _lookup(collection: TaskCollection, operation: str, raw_id: str | int) -> Task | Outcome:
    """The task with that id, or the INVALID_ID / NOT_FOUND outcome to return."""
    task_id = parse_task_id(raw_id)
    if task_id is None:
        shown = str(raw_id)
        if len(shown) > 40:
            shown = shown[:40] + "..."
        return Outcome.failure(operation, ErrorKind.INVALID_ID, f"Invalid task id: {shown!r}")
    task = collection.find(task_id)
    if task is None:
        return Outcome.failure(
            operation, ErrorKind.NOT_FOUND, f"Task #{task_id} not found", task_id=task_id
        )
    return task


def _check_content(
    collection: TaskCollection,
    operation: str,
    content: str,
    *,
    task_id: int | None = None,
) -> Outcome | None:
    if not content:
        return Outcome.failure(
            operation, ErrorKind.EMPTY_CONTENT, "Task text cannot be empty", task_id=task_id
        )
    if len(content) > MAX_CONTENT_LENGTH:
        return Outcome.failure(
            operation,
            ErrorKind.TOO_LONG,
            f"Task text must not exceed {MAX_CONTENT_LENGTH} characters (got {len(content)})",
            task_id=task_id,
        )
    dup = collection.find_duplicate(content, exclude_id=task_id)
    if dup is not None:
        return Outcome.failure(
            operation,
            ErrorKind.DUPLICATE,
            f"A task with this text already exists (#{dup.id})",
            task_id=task_id,
        )
    return None


def format_task(task: Task) -> str:
    mark = "x" if task.done else " "
    line = f"{task.id} [{mark}] {task.content} (created: {task.created_at}"
    if task.done and task.completed_at:
        line += f", completed: {task.completed_at}"
    return line + ")"


def render_tasks(collection: TaskCollection) -> Iterator[str]:
    """Yield one display line per task, in collection order, from current state."""
    for task in collection.tasks:
        yield format_task(task)


def list_tasks(collection: TaskCollection) -> Outcome:
    if not collection.tasks:
        return Outcome.success("list", EMPTY_LIST_MESSAGE, changed=False)
    lines = ["Tasks:", *render_tasks(collection)]
    return Outcome.success("list", "\n".join(lines), changed=False)


def add_task(collection: TaskCollection, content: str, *, clock: Clock = now_local) -> Outcome:
    content = content.strip()
    rejected = _check_content(collection, "add", content)
    if rejected is not None:
        return rejected

    task = Task(
        id=collection.allocate_id(),
        content=content,
        done=False,
        created_at=clock(),
    )
    collection.tasks.append(task)
    return Outcome.success("add", f"Added task #{task.id}: {task.content}", task_id=task.id)


def toggle_task(collection: TaskCollection, raw_id: str | int, *, clock: Clock = now_local) -> Outcome:
    task = _lookup(collection, "toggle", raw_id)
    if isinstance(task, Outcome):
        return task

    if task.done:
        task.mark_pending()
        label = "not done"
    else:
        task.mark_done(clock())
        label = "done"
    return Outcome.success("toggle", f"Task #{task.id} marked as {label}", task_id=task.id)


def edit_task(collection: TaskCollection, raw_id: str | int, new_content: str) -> Outcome:
    task = _lookup(collection, "edit", raw_id)
    if isinstance(task, Outcome):
        return task

    new_content = new_content.strip()
    rejected = _check_content(collection, "edit", new_content, task_id=task.id)
    if rejected is not None:
        return rejected

    changed = new_content != task.content
    task.content = new_content
    return Outcome.success(
        "edit", f"Task #{task.id} updated: {task.content}", task_id=task.id, changed=changed
    )


def delete_task(collection: TaskCollection, raw_id: str | int) -> Outcome:
    task = _lookup(collection, "delete", raw_id)
    if isinstance(task, Outcome):
        return task

    collection.remove(task.id)
    return Outcome.success("delete", f"Task #{task.id} deleted", task_id=task.id)


def clear_all(collection: TaskCollection) -> Outcome:
    removed = len(collection)
    collection.clear()
    return Outcome.success("clear-all", f"All tasks cleared ({removed} removed)")


def complete_all(collection: TaskCollection, *, clock: Clock = now_local) -> Outcome:
    ts = clock()
    count = 0
    for task in collection.tasks:
        if not task.done:
            task.mark_done(ts)
            count += 1
    return Outcome.success(
        "complete-all", f"Marked {count} task(s) as done", changed=count > 0
    )
