# src/task_storage/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole process.
- No database connection at import time; the URL is only parsed by TaskStore.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKSTORE"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    log_level: str
    data_dir: Path
    sql_echo: bool

    # ---- Database ----
    database_url: str
    pool_size: int
    max_overflow: int
    pool_timeout: float
    pool_pre_ping: bool
    verify_on_start: bool

    # ---- Store behaviour ----
    missing_ok: bool

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskstore"))

        # Accept the conventional DATABASE_URL as a fallback.
        database_url = _first_env(
            _k("DATABASE_URL"),
            "DATABASE_URL",
            default=f"sqlite:///{(data_dir / 'tasks.sqlite3').as_posix()}",
        ) or ""

        return Settings(
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            data_dir=data_dir,
            sql_echo=_env_bool(_k("SQL_ECHO"), False),
            database_url=database_url.strip(),
            pool_size=max(1, _env_int(_k("POOL_SIZE"), 5)),
            max_overflow=max(0, _env_int(_k("MAX_OVERFLOW"), 10)),
            pool_timeout=_env_float(_k("POOL_TIMEOUT"), 30.0),
            pool_pre_ping=_env_bool(_k("POOL_PRE_PING"), True),
            verify_on_start=_env_bool(_k("VERIFY_ON_START"), False),
            missing_ok=_env_bool(_k("MISSING_OK"), True),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
