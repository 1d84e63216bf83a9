# src/task_storage/tasks/task_errors.py

"""
Error taxonomy raised by TaskStore.

Every error subclasses StorageError so callers can catch the whole family.
The underlying driver / SQLAlchemy exception is always chained as __cause__.
"""

from __future__ import annotations


class StorageError(Exception):
    """Base class for task storage failures."""


class StorageConnectionError(StorageError):
    """Engine / pool could not be created or the database is unreachable."""


class QueryError(StorageError):
    """A statement failed (network fault, constraint violation, schema mismatch)."""


class ScanError(StorageError):
    """A result row could not be decoded into a Task."""

    def __init__(self, column: str, value: object, reason: str = "") -> None:
        self.column = column
        self.value = value
        msg = f"cannot decode column {column!r} from {value!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class TaskNotFoundError(StorageError):
    """No task row matched the given id (only raised when missing_ok is off)."""

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"task {task_id} not found")


class SchemaError(StorageError):
    """The bootstrap schema cannot be created for this database."""
