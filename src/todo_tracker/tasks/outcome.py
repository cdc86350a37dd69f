# src/todo_tracker/tasks/outcome.py

"""
Structured results of task list operations.

Operations never raise for lookup or validation problems. They return an
Outcome instead, and the CLI shell decides how to print and log it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    INVALID_ID = "invalid_id"
    NOT_FOUND = "not_found"
    EMPTY_CONTENT = "empty_content"
    TOO_LONG = "too_long"
    DUPLICATE = "duplicate"

    @property
    def is_validation(self) -> bool:
        return self in (ErrorKind.EMPTY_CONTENT, ErrorKind.TOO_LONG, ErrorKind.DUPLICATE)


@dataclass(frozen=True, slots=True)
class Outcome:
    operation: str
    message: str
    task_id: int | None = None
    error: ErrorKind | None = None
    changed: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls, operation: str, message: str, *, task_id: int | None = None, changed: bool = True
    ) -> Outcome:
        return cls(operation=operation, message=message, task_id=task_id, changed=changed)

    @classmethod
    def failure(
        cls, operation: str, error: ErrorKind, message: str, *, task_id: int | None = None
    ) -> Outcome:
        return cls(operation=operation, message=message, task_id=task_id, error=error)

    def log_fields(self) -> dict[str, object]:
        """Flat key/value view for one log line."""
        return {
            "op": self.operation,
            "task_id": self.task_id,
            "ok": self.ok,
            "error": self.error.value if self.error else None,
            "reason": None if self.ok else self.message,
        }
