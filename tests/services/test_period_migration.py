"""Tests for moving records off the legacy placeholder period."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from compensation.core.periods import LEGACY_PERIOD
from compensation.models import SalaryRecord
from compensation.services.period_migration import migrate_legacy_periods


def _record(user_id: int, period: str, created_at: datetime) -> SalaryRecord:
    return SalaryRecord(user_id=user_id, period=period, created_at=created_at)


def test_legacy_records_move_to_their_creation_month(session) -> None:
    session.add_all(
        [
            _record(1, LEGACY_PERIOD, datetime(2024, 3, 15, 9, 30)),
            _record(2, LEGACY_PERIOD, datetime(2024, 4, 1, 0, 0)),
            _record(3, "2024-04", datetime(2024, 4, 2, 0, 0)),
        ]
    )
    session.commit()

    outcome = migrate_legacy_periods(session)
    session.commit()

    assert outcome.migrated == 2
    assert outcome.remaining == 0
    periods = dict(session.execute(select(SalaryRecord.user_id, SalaryRecord.period)).all())
    assert periods == {1: "2024-03", 2: "2024-04", 3: "2024-04"}


def test_migration_skips_records_that_would_collide(session) -> None:
    session.add_all(
        [
            _record(1, LEGACY_PERIOD, datetime(2024, 3, 15)),
            _record(1, "2024-03", datetime(2024, 3, 20)),
        ]
    )
    session.commit()

    outcome = migrate_legacy_periods(session)

    assert outcome.migrated == 0
    assert outcome.skipped_user_ids == [1]
    legacy = session.scalars(select(SalaryRecord).where(SalaryRecord.period == LEGACY_PERIOD)).all()
    assert len(legacy) == 1


def test_migration_without_legacy_records_is_a_no_op(session) -> None:
    session.add(_record(1, "2024-03", datetime(2024, 3, 15)))
    session.commit()

    outcome = migrate_legacy_periods(session)

    assert outcome.migrated == 0
    assert outcome.remaining == 0
