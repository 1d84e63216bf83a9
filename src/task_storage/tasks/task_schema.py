# src/task_storage/tasks/task_schema.py

"""
Bootstrap DDL for the tasks database.

The schema is owned by whoever runs the database; this module only creates
missing tables for local development and tests:
- CREATE TABLE IF NOT EXISTS, never ALTER
- one statement list per supported dialect
"""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_POSTGRESQL_DDL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS labels (
        id BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id BIGINT GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
        opened BIGINT NOT NULL DEFAULT extract(epoch from now())::BIGINT,
        closed BIGINT NOT NULL DEFAULT 0,
        author_id BIGINT NOT NULL REFERENCES users(id),
        assigned_id BIGINT REFERENCES users(id),
        title TEXT NOT NULL,
        content TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS task_labels (
        task_id BIGINT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
        label_id BIGINT NOT NULL REFERENCES labels(id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_author ON tasks(author_id)",
    "CREATE INDEX IF NOT EXISTS idx_task_labels_label ON task_labels(label_id)",
)

_SQLITE_DDL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS labels (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        opened INTEGER NOT NULL DEFAULT (CAST(strftime('%s', 'now') AS INTEGER)),
        closed INTEGER NOT NULL DEFAULT 0,
        author_id INTEGER NOT NULL REFERENCES users(id),
        assigned_id INTEGER REFERENCES users(id),
        title TEXT NOT NULL,
        content TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS task_labels (
        task_id INTEGER NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
        label_id INTEGER NOT NULL REFERENCES labels(id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_author ON tasks(author_id)",
    "CREATE INDEX IF NOT EXISTS idx_task_labels_label ON task_labels(label_id)",
)

DDL_BY_DIALECT: dict[str, tuple[str, ...]] = {
    "postgresql": _POSTGRESQL_DDL,
    "sqlite": _SQLITE_DDL,
}


def ensure_schema(engine: Engine) -> None:
    """Create the users/labels/tasks/task_labels tables if they are missing."""
    dialect = engine.dialect.name
    statements = DDL_BY_DIALECT.get(dialect)
    if statements is None:
        raise ValueError(f"no bootstrap schema for dialect {dialect!r}")

    with engine.begin() as conn:
        for stmt in statements:
            conn.execute(text(stmt))
    logger.info("Schema ensured dialect=%s tables=users,labels,tasks,task_labels", dialect)
