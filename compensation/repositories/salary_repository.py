"""Data access for salary records."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from sqlalchemy import case, func, select

from compensation.models import SalaryRecord

from .base import BaseRepository


@dataclass(frozen=True)
class PeriodCountRow:
    period: str
    record_count: int
    archived_count: int


class SalaryRecordRepository(BaseRepository):
    """Queries over ``salary_record``; every period read filters on equality."""

    def get(self, record_id: int) -> SalaryRecord | None:
        return self._session.get(SalaryRecord, record_id)

    def find_all(self) -> list[SalaryRecord]:
        statement = select(SalaryRecord).order_by(SalaryRecord.period.desc(), SalaryRecord.id)
        return list(self._session.scalars(statement))

    def find_by_period(self, period: str) -> list[SalaryRecord]:
        statement = (
            select(SalaryRecord)
            .where(SalaryRecord.period == period)
            .order_by(SalaryRecord.id)
        )
        return list(self._session.scalars(statement))

    def find_unarchived_by_period(self, period: str) -> list[SalaryRecord]:
        statement = (
            select(SalaryRecord)
            .where(SalaryRecord.period == period, SalaryRecord.archived.is_(False))
            .order_by(SalaryRecord.id)
        )
        return list(self._session.scalars(statement))

    def count_by_period(self, period: str) -> int:
        statement = select(func.count()).select_from(SalaryRecord).where(
            SalaryRecord.period == period
        )
        return int(self._session.scalar(statement) or 0)

    def exists_archived_in_period(self, period: str) -> bool:
        statement = (
            select(SalaryRecord.id)
            .where(SalaryRecord.period == period, SalaryRecord.archived.is_(True))
            .limit(1)
        )
        return self._session.scalar(statement) is not None

    def period_counts(self) -> list[PeriodCountRow]:
        """Return record and archived counts per period, newest period first."""

        archived_count = func.sum(case((SalaryRecord.archived.is_(True), 1), else_=0))
        statement = (
            select(SalaryRecord.period, func.count(SalaryRecord.id), archived_count)
            .group_by(SalaryRecord.period)
            .order_by(SalaryRecord.period.desc())
        )
        return [
            PeriodCountRow(period=period, record_count=int(total), archived_count=int(archived or 0))
            for period, total, archived in self._session.execute(statement)
        ]

    def distinct_active_periods(self) -> list[str]:
        statement = (
            select(SalaryRecord.period)
            .where(SalaryRecord.archived.is_(False))
            .distinct()
            .order_by(SalaryRecord.period.desc())
        )
        return list(self._session.scalars(statement))

    def add_all(self, records: Iterable[SalaryRecord]) -> Sequence[SalaryRecord]:
        records = list(records)
        self._session.add_all(records)
        self._session.flush()
        return records
