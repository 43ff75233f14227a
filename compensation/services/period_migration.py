"""Re-key records stamped with the legacy placeholder period."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from compensation.core.logger import get_logger
from compensation.core.periods import LEGACY_PERIOD, period_of
from compensation.models import SalaryRecord

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class MigrationOutcome:
    migrated: int
    remaining: int
    skipped_user_ids: list[int]


def migrate_legacy_periods(session: Session) -> MigrationOutcome:
    """Move ``1970-01`` records to the month of their ``created_at``.

    A record whose target ``(user_id, period)`` is already taken stays on the
    placeholder and is reported as skipped. The caller owns the commit.
    """

    legacy = list(
        session.scalars(
            select(SalaryRecord)
            .where(SalaryRecord.period == LEGACY_PERIOD)
            .order_by(SalaryRecord.id)
        )
    )
    if not legacy:
        LOGGER.info("Salary period migration: nothing to migrate")
        return MigrationOutcome(migrated=0, remaining=0, skipped_user_ids=[])

    LOGGER.info("Salary period migration: %d legacy records found", len(legacy))
    taken = {
        (user_id, period)
        for user_id, period in session.execute(
            select(SalaryRecord.user_id, SalaryRecord.period).where(
                SalaryRecord.period != LEGACY_PERIOD
            )
        )
    }

    migrated = 0
    skipped: list[int] = []
    for record in legacy:
        if record.created_at is None:
            skipped.append(record.user_id)
            continue
        target = period_of(record.created_at)
        if (record.user_id, target) in taken:
            skipped.append(record.user_id)
            continue
        record.period = target
        taken.add((record.user_id, target))
        migrated += 1
    session.flush()

    if skipped:
        LOGGER.warning(
            "Salary period migration: %d records left on %s (users %s)",
            len(skipped),
            LEGACY_PERIOD,
            skipped,
        )
    LOGGER.info("Salary period migration: migrated %d records", migrated)
    return MigrationOutcome(migrated=migrated, remaining=len(skipped), skipped_user_ids=skipped)
