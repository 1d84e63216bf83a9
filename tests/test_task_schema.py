# tests/test_task_schema.py

from __future__ import annotations

from types import SimpleNamespace

import pytest
from sqlalchemy import inspect

from task_storage.tasks.task_schema import DDL_BY_DIALECT, ensure_schema
from task_storage.tasks.task_store import TaskStore


def test_bootstrap_creates_expected_tables(db_url: str) -> None:
    with TaskStore(db_url) as s:
        ensure_schema(s.engine)
        ensure_schema(s.engine)

        insp = inspect(s.engine)
        assert {"users", "labels", "tasks", "task_labels"} <= set(insp.get_table_names())
        cols = [c["name"] for c in insp.get_columns("tasks")]
        assert cols == ["id", "opened", "closed", "author_id", "assigned_id", "title", "content"]


def test_every_dialect_defines_all_tables() -> None:
    for dialect, statements in DDL_BY_DIALECT.items():
        ddl = "\n".join(statements)
        for table in ("users", "labels", "tasks", "task_labels"):
            assert f"CREATE TABLE IF NOT EXISTS {table} " in ddl, (dialect, table)


def test_unknown_dialect_is_rejected() -> None:
    fake_engine = SimpleNamespace(dialect=SimpleNamespace(name="oracle"))
    with pytest.raises(ValueError):
        ensure_schema(fake_engine)  # type: ignore[arg-type]
