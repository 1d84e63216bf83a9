# src/task_storage/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from .task_errors import (
    QueryError,
    ScanError,
    SchemaError,
    StorageConnectionError,
    TaskNotFoundError,
)
from .task_models import Task
from .task_schema import ensure_schema

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

_TASK_COLUMNS = """
    tasks.id AS id,
    tasks.opened AS opened,
    tasks.closed AS closed,
    tasks.author_id AS author_id,
    tasks.assigned_id AS assigned_id,
    tasks.title AS title,
    tasks.content AS content
"""


class TaskStore:
    """
    Relational task store on top of a pooled SQLAlchemy engine.

    Works against PostgreSQL (production) and SQLite (local runs / tests).
    Each public method checks out one connection from the pool and runs a
    single statement; there are no multi-statement transactions.

    Thread-safety:
    - the only shared state is the engine, whose pool is thread-safe
    """

    def __init__(
        self,
        database_url: str,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: float = 30.0,
        pool_pre_ping: bool = True,
        missing_ok: bool = True,
        verify: bool = False,
    ) -> None:
        self._missing_ok = missing_ok
        self._engine = self._create_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_pre_ping=pool_pre_ping,
        )
        if verify:
            try:
                self.ping()
            except StorageConnectionError:
                self._engine.dispose()
                raise
        logger.info(
            "TaskStore ready url=%s missing_ok=%s",
            self._engine.url.render_as_string(hide_password=True),
            missing_ok,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> TaskStore:
        return cls(
            settings.database_url,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
            pool_pre_ping=settings.pool_pre_ping,
            missing_ok=settings.missing_ok,
            verify=settings.verify_on_start,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        """Release every pooled connection."""
        self._engine.dispose()
        logger.info("TaskStore closed")

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    @staticmethod
    def _create_engine(
        database_url: str,
        *,
        pool_size: int,
        max_overflow: int,
        pool_timeout: float,
        pool_pre_ping: bool,
    ) -> Engine:
        try:
            url = make_url(database_url)
            if url.get_backend_name() == "sqlite":
                # SQLite requires check_same_thread=False for usage across threads
                engine = create_engine(
                    url,
                    connect_args={"check_same_thread": False},
                    pool_pre_ping=pool_pre_ping,
                )
                event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            else:
                engine = create_engine(
                    url,
                    pool_size=pool_size,
                    max_overflow=max_overflow,
                    pool_timeout=pool_timeout,
                    pool_pre_ping=pool_pre_ping,
                )
        except (SQLAlchemyError, ImportError) as exc:
            logger.error("Failed to create database engine: %s", exc)
            raise StorageConnectionError(f"cannot create database engine: {exc}") from exc
        return engine

    def _fetch_tasks(self, sql: str, params: Mapping[str, Any] | None = None) -> list[Task]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(text(sql), dict(params or {})).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Task query failed: %s", exc)
            raise QueryError(str(exc)) from exc
        # Decode after the connection is released; any bad row fails the whole list.
        return [self._row_to_task(r) for r in rows]

    def _execute_write(self, sql: str, params: Mapping[str, Any]) -> int:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(text(sql), dict(params))
                return int(result.rowcount)
        except SQLAlchemyError as exc:
            logger.error("Task write failed: %s", exc)
            raise QueryError(str(exc)) from exc

    def _check_affected(self, task_id: int, affected: int) -> bool:
        if affected:
            return True
        if not self._missing_ok:
            raise TaskNotFoundError(task_id)
        logger.debug("No task row matched id=%s", task_id)
        return False

    @staticmethod
    def _as_int(row: Mapping[str, Any], column: str) -> int:
        value = row[column]
        if value is None:
            raise ScanError(column, value, "unexpected NULL")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # NUMERIC columns come back as Decimal; only whole numbers fit an int.
        if isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
            return int(value)
        raise ScanError(column, value, "expected integer")

    @classmethod
    def _as_optional_int(cls, row: Mapping[str, Any], column: str) -> int | None:
        if row[column] is None:
            return None
        return cls._as_int(row, column)

    @staticmethod
    def _as_str(row: Mapping[str, Any], column: str) -> str:
        value = row[column]
        if value is None:
            raise ScanError(column, value, "unexpected NULL")
        if not isinstance(value, str):
            raise ScanError(column, value, "expected text")
        return value

    def _row_to_task(self, row: Mapping[str, Any]) -> Task:
        return Task(
            id=self._as_int(row, "id"),
            opened=self._as_int(row, "opened"),
            closed=self._as_optional_int(row, "closed") or 0,
            author_id=self._as_int(row, "author_id"),
            assigned_id=self._as_optional_int(row, "assigned_id"),
            title=self._as_str(row, "title"),
            content=self._as_str(row, "content"),
        )

    # ---- public API ----

    def ensure_schema(self) -> None:
        try:
            ensure_schema(self._engine)
        except ValueError as exc:
            raise SchemaError(str(exc)) from exc
        except SQLAlchemyError as exc:
            logger.error("Schema bootstrap failed: %s", exc)
            raise QueryError(str(exc)) from exc

    def ping(self) -> None:
        """Check out a connection and run a trivial query."""
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Database ping failed: %s", exc)
            raise StorageConnectionError(f"database unreachable: {exc}") from exc

    def list_all(self) -> list[Task]:
        return self._fetch_tasks(
            f"""
            SELECT {_TASK_COLUMNS}
            FROM tasks
            ORDER BY tasks.id
            """
        )

    def create(self, task: Task) -> int:
        """
        Insert a new task and return its id.

        Only author_id, assigned_id, title and content are written; the
        database assigns id and opened.
        """
        try:
            with self._engine.begin() as conn:
                task_id = conn.execute(
                    text(
                        """
                        INSERT INTO tasks (author_id, assigned_id, title, content)
                        VALUES (:author_id, :assigned_id, :title, :content)
                        RETURNING id
                        """
                    ),
                    {
                        "author_id": task.author_id,
                        "assigned_id": task.assigned_id,
                        "title": task.title,
                        "content": task.content,
                    },
                ).scalar_one()
        except SQLAlchemyError as exc:
            logger.error("Task insert failed author_id=%s: %s", task.author_id, exc)
            raise QueryError(str(exc)) from exc

        task_id = int(task_id)
        logger.debug(
            "Task added id=%s author_id=%s assigned_id=%s",
            task_id,
            task.author_id,
            task.assigned_id,
        )
        return task_id

    def list_by_author(self, author_id: int) -> list[Task]:
        return self._fetch_tasks(
            f"""
            SELECT {_TASK_COLUMNS}
            FROM tasks
            WHERE tasks.author_id = :author_id
            ORDER BY tasks.id
            """,
            {"author_id": int(author_id)},
        )

    def list_by_label(self, label_id: int) -> list[Task]:
        """
        Tasks linked to the given label, each task at most once.

        A semi-join is used so duplicate task_labels rows for the same
        (task, label) pair cannot multiply a task in the result.
        """
        return self._fetch_tasks(
            f"""
            SELECT {_TASK_COLUMNS}
            FROM tasks
            WHERE EXISTS (
                SELECT 1
                FROM task_labels
                JOIN labels ON labels.id = task_labels.label_id
                WHERE task_labels.task_id = tasks.id
                  AND labels.id = :label_id
            )
            ORDER BY tasks.id
            """,
            {"label_id": int(label_id)},
        )

    def update_content(self, task: Task) -> bool:
        """
        Overwrite the content of task.id; every other column is left alone.

        Returns True if a row was updated. A missing row returns False, or
        raises TaskNotFoundError when the store was built with missing_ok=False.
        """
        affected = self._execute_write(
            """
            UPDATE tasks
            SET content = :content
            WHERE id = :id
            """,
            {"content": task.content, "id": int(task.id)},
        )
        return self._check_affected(task.id, affected)

    def delete_by_id(self, task_id: int) -> bool:
        """Delete one task; same missing-row policy as update_content()."""
        affected = self._execute_write(
            "DELETE FROM tasks WHERE id = :id",
            {"id": int(task_id)},
        )
        if affected:
            logger.debug("Task deleted id=%s", task_id)
        return self._check_affected(task_id, affected)


def _enable_sqlite_foreign_keys(dbapi_conn: Any, _record: Any) -> None:
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA foreign_keys=ON")
    finally:
        cur.close()
