# tests/test_task_store.py

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from todo_tracker.tasks import task_list
from todo_tracker.tasks.task_models import Task, TaskCollection
from todo_tracker.tasks.task_store import (
    CorruptStoreError,
    StorageIOError,
    StoreError,
    TaskStore,
    parse_collection,
    serialize_collection,
)


def test_missing_file_loads_empty_collection(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "nope" / "tasks.json")
    c = store.load()
    assert c.tasks == []
    assert c.next_id == 1
    assert not store.exists()


def test_save_then_load_round_trip(store: TaskStore, clock) -> None:
    c = TaskCollection()
    task_list.add_task(c, "Buy milk", clock=clock)
    task_list.add_task(c, "Позвонить маме", clock=clock)
    task_list.toggle_task(c, "1", clock=clock)
    task_list.delete_task(c, "2")
    task_list.add_task(c, "Call mom", clock=clock)

    store.save(c)
    loaded = store.load()

    assert loaded == c
    assert loaded.next_id == 4


def test_serialization_is_byte_stable(store: TaskStore, clock) -> None:
    c = TaskCollection()
    task_list.add_task(c, "ünïcödé", clock=clock)
    task_list.add_task(c, "second", clock=clock)
    task_list.toggle_task(c, "2", clock=clock)
    store.save(c)

    first = store.path.read_text("utf-8")
    store.save(store.load())
    second = store.path.read_text("utf-8")

    assert first == second
    assert first == serialize_collection(parse_collection(first))


def test_file_format(store: TaskStore, clock) -> None:
    c = TaskCollection()
    task_list.add_task(c, "Buy milk", clock=clock)
    task_list.add_task(c, "Café", clock=clock)
    task_list.toggle_task(c, "1", clock=clock)
    store.save(c)

    text = store.path.read_text("utf-8")
    assert text.endswith("\n")
    assert '\n  "tasks": [' in text
    assert "Café" in text  # not \u-escaped

    data = json.loads(text)
    assert data == {
        "tasks": [
            {
                "id": 1,
                "content": "Buy milk",
                "done": True,
                "created_at": "2026-10-18 09:00:00",
                "completed_at": "2026-10-18 09:00:02",
            },
            {
                "id": 2,
                "content": "Café",
                "done": False,
                "created_at": "2026-10-18 09:00:01",
            },
        ],
        "next_id": 3,
    }


def test_load_tolerates_unknown_fields_and_camel_case(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            {
                "version": 7,
                "tasks": [
                    {
                        "id": 3,
                        "content": "x",
                        "done": True,
                        "createdAt": "2026-01-01 00:00:00",
                        "completedAt": "2026-01-02 00:00:00",
                        "priority": "high",
                    }
                ],
                "nextId": 9,
            }
        ),
        "utf-8",
    )

    c = TaskStore(path).load()

    assert c.next_id == 9
    assert c.tasks == [
        Task(
            id=3,
            content="x",
            done=True,
            created_at="2026-01-01 00:00:00",
            completed_at="2026-01-02 00:00:00",
        )
    ]


def test_load_repairs_stale_next_id(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(
        '{"tasks": [{"id": 4, "content": "a", "done": false, "created_at": ""}], "next_id": 2}',
        "utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="todo_tracker"):
        c = TaskStore(path).load()

    assert c.next_id == 5
    assert "Repairing next_id" in caplog.text


def test_load_fills_missing_next_id_and_tasks() -> None:
    assert parse_collection("{}") == TaskCollection()
    c = parse_collection('{"tasks": [{"id": 2, "content": "a"}]}')
    assert c.next_id == 3
    assert c.tasks[0].done is False
    assert c.tasks[0].created_at == ""


def test_pending_task_drops_stray_completed_at() -> None:
    c = parse_collection(
        '{"tasks": [{"id": 1, "content": "a", "done": false, "completed_at": "2026-01-01 00:00:00"}],'
        ' "next_id": 2}'
    )
    assert c.tasks[0].completed_at is None


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not json",
        "{",
        "[]",
        '{"tasks": {}}',
        '{"tasks": [1]}',
        '{"tasks": [{"content": "a"}]}',
        '{"tasks": [{"id": "1", "content": "a"}]}',
        '{"tasks": [{"id": true, "content": "a"}]}',
        '{"tasks": [{"id": 0, "content": "a"}]}',
        '{"tasks": [{"id": 1, "content": 5}]}',
        '{"tasks": [{"id": 1, "content": "a", "done": "yes"}]}',
        '{"tasks": [{"id": 1, "content": "a", "created_at": 5}]}',
        '{"tasks": [{"id": 1, "content": "a"}, {"id": 1, "content": "b"}]}',
        '{"tasks": [], "next_id": "2"}',
        "[" * 200000,
        '{"tasks": ' + "[" * 200000,
    ],
)
def test_corrupt_content_raises_corrupt_store(tmp_path: Path, text: str) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(text, "utf-8")

    with pytest.raises(CorruptStoreError) as excinfo:
        TaskStore(path).load()

    assert excinfo.value.path == path
    assert isinstance(excinfo.value, StoreError)
    assert not isinstance(excinfo.value, StorageIOError)


def test_invalid_utf8_is_corrupt(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_bytes(b'{"tasks": [], "next_id": 1, "x": "\xff"}')
    with pytest.raises(CorruptStoreError):
        TaskStore(path).load()


def test_directory_in_place_of_file_is_io_error(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.mkdir()

    with pytest.raises(StorageIOError):
        TaskStore(path).load()
    with pytest.raises(StorageIOError):
        TaskStore(path).save(TaskCollection())


def test_save_creates_parent_dirs(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "a" / "b" / "tasks.json")
    store.save(TaskCollection())
    assert store.load() == TaskCollection()


def test_failed_save_keeps_previous_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = TaskStore(tmp_path / "tasks.json")
    original = TaskCollection()
    task_list.add_task(original, "keep me")
    store.save(original)
    before = store.path.read_text("utf-8")

    def _full_disk(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("todo_tracker.tasks.task_store.os.replace", _full_disk)

    changed = store.load()
    task_list.add_task(changed, "lost")
    with pytest.raises(StorageIOError) as excinfo:
        store.save(changed)

    assert excinfo.value.cause.errno == 28
    assert store.path.read_text("utf-8") == before
    assert not (tmp_path / "tasks.json.tmp").exists()
