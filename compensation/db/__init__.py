"""Database helpers and SQLAlchemy session factories."""

from .engine import create_sync_engine, get_sqlalchemy_url
from .session import get_sessionmaker, session_scope, unit_of_work

__all__ = [
    "create_sync_engine",
    "get_sessionmaker",
    "get_sqlalchemy_url",
    "session_scope",
    "unit_of_work",
]
