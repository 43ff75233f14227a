"""Shared fixtures: an in-memory database and a salaried member roster."""
from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from compensation.core.locks import PeriodLocks
from compensation.domain import RotationThresholds, SalaryConfigSnapshot
from compensation.models import Base, Member, Role
from compensation.services import SalaryConfigService, SalaryReportService, SalaryService
from compensation.services.salary_config import DEFAULT_CHECKIN_TIERS

ROSTER: tuple[tuple[str, Role], ...] = (
    ("intern-a", Role.INTERN),
    ("leader", Role.LEADER),
    ("vice-a", Role.VICE_LEADER),
    ("vice-b", Role.VICE_LEADER),
    ("intern-b", Role.INTERN),
    ("applicant", Role.APPLICANT),
    ("admin", Role.ADMIN),
)


@pytest.fixture()
def session() -> Iterator[Session]:
    """Provide an in-memory database session for each test."""

    engine = create_engine(
        "sqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, future=True, autoflush=False, expire_on_commit=False)
    with SessionLocal() as session:
        yield session
    engine.dispose()


@pytest.fixture()
def members(session: Session) -> list[Member]:
    """Seven directory entries, five of them salaried."""

    rows = [Member(username=name, role=role) for name, role in ROSTER]
    session.add_all(rows)
    session.commit()
    return rows


@pytest.fixture()
def salaried(members: list[Member]) -> list[Member]:
    return [member for member in members if member.role in (Role.LEADER, Role.VICE_LEADER, Role.INTERN)]


@pytest.fixture()
def config_service(session: Session) -> SalaryConfigService:
    return SalaryConfigService(session)


@pytest.fixture()
def salary_service(session: Session) -> SalaryService:
    return SalaryService(session, locks=PeriodLocks())


@pytest.fixture()
def report_service(session: Session) -> SalaryReportService:
    return SalaryReportService(session)


@pytest.fixture()
def snapshot() -> SalaryConfigSnapshot:
    """The built-in defaults, without touching a database."""

    return SalaryConfigSnapshot(
        salary_pool_total=2000,
        formal_member_count=5,
        base_allocation=400,
        mini_coins_min=200,
        mini_coins_max=400,
        points_to_coins_ratio=2,
        checkin_tiers=DEFAULT_CHECKIN_TIERS,
        rotation_thresholds=RotationThresholds(100, 150, 2, 100, 2),
    )
