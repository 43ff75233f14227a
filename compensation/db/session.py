"""Session factories and transaction scopes."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session, sessionmaker

from .engine import create_sync_engine


def get_sessionmaker(url: str | None = None, **kwargs) -> sessionmaker:
    """Return a ``sessionmaker`` whose objects stay readable after commit."""

    engine = create_sync_engine(url, **kwargs)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Commit ``session`` when the block succeeds, roll back when it raises."""

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


@contextmanager
def session_scope(url: str | None = None, **kwargs) -> Iterator[Session]:
    """Open a session for a script and run it as one unit of work."""

    session = get_sessionmaker(url, **kwargs)()
    try:
        with unit_of_work(session):
            yield session
    finally:
        session.close()
