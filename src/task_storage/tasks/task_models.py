# src/task_storage/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Task:
    """
    A persisted work item.

    Notes:
    - id and opened are assigned by the database on insert; values set by the
      caller are ignored by TaskStore.create().
    - closed stays 0 until the task is closed by some outside process.
    - assigned_id is None for an unassigned task (stored as NULL).
    """

    author_id: int
    title: str
    content: str
    assigned_id: int | None = None

    id: int = 0
    opened: int = 0
    closed: int = 0

    @property
    def is_closed(self) -> bool:
        return self.closed > 0
