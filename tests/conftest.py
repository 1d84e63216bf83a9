# tests/conftest.py

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy import text

from task_storage.config import Settings
from task_storage.tasks.task_store import TaskStore


def _seed(store: TaskStore) -> None:
    with store.engine.begin() as conn:
        conn.execute(
            text("INSERT INTO users (id, name) VALUES (1, 'alice'), (2, 'bob'), (3, 'carol')")
        )
        conn.execute(text("INSERT INTO labels (id, name) VALUES (1, 'bug'), (2, 'feature')"))


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{(tmp_path / 'tasks.sqlite3').as_posix()}"


@pytest.fixture()
def store(db_url: str) -> Iterator[TaskStore]:
    """
    Real TaskStore over a temporary SQLite file with the bootstrap schema,
    three users (1..3) and two labels (1..2).
    """
    s = TaskStore(db_url)
    s.ensure_schema()
    _seed(s)
    yield s
    s.close()


@pytest.fixture()
def strict_store(db_url: str) -> Iterator[TaskStore]:
    """Same database setup, but missing rows raise TaskNotFoundError."""
    s = TaskStore(db_url, missing_ok=False)
    s.ensure_schema()
    _seed(s)
    yield s
    s.close()


@pytest.fixture()
def settings(tmp_path: Path, db_url: str) -> Settings:
    """Settings pointing at tmp paths, independent of the process environment."""
    return dataclasses.replace(
        Settings.from_env(),
        data_dir=tmp_path / "data",
        database_url=db_url,
        verify_on_start=False,
        missing_ok=True,
    )


@pytest.fixture()
def link_label(store: TaskStore):
    """Insert a raw task_labels row (duplicates allowed)."""

    def _link(task_id: int, label_id: int) -> None:
        with store.engine.begin() as conn:
            conn.execute(
                text("INSERT INTO task_labels (task_id, label_id) VALUES (:t, :l)"),
                {"t": task_id, "l": label_id},
            )

    return _link
