"""Shared helpers for repositories."""
from __future__ import annotations

from sqlalchemy.orm import Session


class BaseRepository:
    """Base repository holding the unit-of-work session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session
