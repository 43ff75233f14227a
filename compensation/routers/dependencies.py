"""Request-scoped dependencies shared by the API routers."""
from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from compensation.db.session import get_sessionmaker
from compensation.services import SalaryConfigService, SalaryReportService, SalaryService


@lru_cache(maxsize=1)
def session_factory() -> sessionmaker:
    return get_sessionmaker()


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session for the request lifecycle."""

    session = session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_salary_service(session: Session = Depends(get_db_session)) -> SalaryService:
    return SalaryService(session)


def get_config_service(session: Session = Depends(get_db_session)) -> SalaryConfigService:
    return SalaryConfigService(session)


def get_report_service(session: Session = Depends(get_db_session)) -> SalaryReportService:
    return SalaryReportService(session)
