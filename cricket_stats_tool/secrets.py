from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DB_PATH = Path("data/cricket_stats.db")
DB_PATH_ENV = "CRICKET_STATS_DB"
LOG_LEVEL_ENV = "CRICKET_STATS_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_env_files(env_path: str | Path = ".env") -> None:
    """Load `.env` when present without overriding variables already set."""
    path = Path(env_path)
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def get_secret(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value:
        return value
    return default


def get_db_path() -> Path:
    return Path(get_secret(DB_PATH_ENV) or DEFAULT_DB_PATH)


def configure_logging(level: str | None = None) -> None:
    level_name = (level or get_secret(LOG_LEVEL_ENV, "INFO") or "INFO").upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise ValueError(f"Unknown log level '{level_name}'")
    logging.basicConfig(level=level_name, format=LOG_FORMAT)
