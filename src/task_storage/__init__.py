# src/task_storage/__init__.py

"""Relational storage for tasks, their authors, assignees and labels."""

from __future__ import annotations

from .tasks.task_errors import (
    QueryError,
    ScanError,
    SchemaError,
    StorageConnectionError,
    StorageError,
    TaskNotFoundError,
)
from .tasks.task_models import Task
from .tasks.task_store import TaskStore

__all__ = [
    "QueryError",
    "ScanError",
    "SchemaError",
    "StorageConnectionError",
    "StorageError",
    "Task",
    "TaskNotFoundError",
    "TaskStore",
]
