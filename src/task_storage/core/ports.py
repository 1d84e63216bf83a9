# src/task_storage/core/ports.py

"""
Ports (interfaces) for code that consumes task storage.

Host code depends on this Protocol instead of TaskStore itself,
so tests can pass an in-memory fake.
"""

from __future__ import annotations

from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    # Reads
    def list_all(self) -> list[Task]: ...
    def list_by_author(self, author_id: int) -> list[Task]: ...
    def list_by_label(self, label_id: int) -> list[Task]: ...

    # Writes
    def create(self, task: Task) -> int: ...
    def update_content(self, task: Task) -> bool: ...
    def delete_by_id(self, task_id: int) -> bool: ...

    # Lifecycle
    def close(self) -> None: ...
