"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    DATABASE_URL,
    DB_RESET,
    HOST,
    LOG_LEVEL,
    PORT,
)
from .database import create_db_engine, get_session, init_db
from .logging import setup_logging
from .time import isoformat, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DATABASE_URL",
    "DB_RESET",
    "HOST",
    "LOG_LEVEL",
    "PORT",
    "create_db_engine",
    "get_session",
    "init_db",
    "isoformat",
    "setup_logging",
    "utcnow",
]
