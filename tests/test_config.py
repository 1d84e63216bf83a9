# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from task_storage.config import Settings

_VARS = (
    "TASKSTORE_DATABASE_URL",
    "DATABASE_URL",
    "TASKSTORE_DATA_DIR",
    "TASKSTORE_POOL_SIZE",
    "TASKSTORE_MAX_OVERFLOW",
    "TASKSTORE_POOL_TIMEOUT",
    "TASKSTORE_POOL_PRE_PING",
    "TASKSTORE_MISSING_OK",
    "TASKSTORE_VERIFY_ON_START",
    "TASKSTORE_LOG_LEVEL",
    "TASKSTORE_SQL_ECHO",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.database_url == "sqlite:///.local/taskstore/tasks.sqlite3"
    assert s.data_dir == Path(".local/taskstore")
    assert s.pool_size == 5
    assert s.max_overflow == 10
    assert s.pool_timeout == 30.0
    assert s.pool_pre_ping is True
    assert s.missing_ok is True
    assert s.verify_on_start is False
    assert s.log_level == "INFO"
    assert s.sql_echo is False


def test_prefixed_url_wins_over_database_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://u@db/fallback")
    assert Settings.from_env().database_url == "postgresql+psycopg://u@db/fallback"

    monkeypatch.setenv("TASKSTORE_DATABASE_URL", "  postgresql+psycopg://u@db/tasks  ")
    assert Settings.from_env().database_url == "postgresql+psycopg://u@db/tasks"


def test_overrides_and_invalid_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKSTORE_POOL_SIZE", "20")
    monkeypatch.setenv("TASKSTORE_MAX_OVERFLOW", "lots")
    monkeypatch.setenv("TASKSTORE_POOL_TIMEOUT", "2.5")
    monkeypatch.setenv("TASKSTORE_MISSING_OK", "no")
    monkeypatch.setenv("TASKSTORE_VERIFY_ON_START", "yes")
    monkeypatch.setenv("TASKSTORE_DATA_DIR", "/srv/tasks")

    s = Settings.from_env()
    assert s.pool_size == 20
    assert s.max_overflow == 10
    assert s.pool_timeout == 2.5
    assert s.missing_ok is False
    assert s.verify_on_start is True
    assert s.data_dir == Path("/srv/tasks")
    assert s.database_url == "sqlite:////srv/tasks/tasks.sqlite3"


def test_pool_size_is_at_least_one(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKSTORE_POOL_SIZE", "0")
    assert Settings.from_env().pool_size == 1
