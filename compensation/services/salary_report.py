"""Reports over persisted salary records.

Figures are read back verbatim from the records; nothing is recomputed.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from compensation.core.errors import NotFoundError, ValidationError
from compensation.core.logger import get_logger
from compensation.core.periods import is_valid_period
from compensation.models import SalaryRecord
from compensation.repositories import MemberRepository, SalaryRecordRepository

from .salary_config import SalaryConfigService

LOGGER = get_logger(__name__)

UNKNOWN = "unknown"


@dataclass(frozen=True)
class MemberSalaryDetail:
    """One report row: the record's dimensions and derived values."""

    user_id: int
    username: str
    role: str
    community_activity_points: int
    checkin_count: int
    checkin_points: int
    violation_handling_count: int
    violation_handling_points: int
    task_completion_points: int
    announcement_count: int
    announcement_points: int
    event_hosting_points: int
    birthday_bonus_points: int
    monthly_excellent_points: int
    base_points: int
    bonus_points: int
    total_points: int
    mini_coins: int
    salary_amount: Decimal
    remark: str | None
    archived: bool

    @classmethod
    def from_record(cls, record: SalaryRecord, *, username: str, role: str) -> "MemberSalaryDetail":
        return cls(
            user_id=record.user_id,
            username=username,
            role=role,
            community_activity_points=record.community_activity_points,
            checkin_count=record.checkin_count,
            checkin_points=record.checkin_points,
            violation_handling_count=record.violation_handling_count,
            violation_handling_points=record.violation_handling_points,
            task_completion_points=record.task_completion_points,
            announcement_count=record.announcement_count,
            announcement_points=record.announcement_points,
            event_hosting_points=record.event_hosting_points,
            birthday_bonus_points=record.birthday_bonus_points,
            monthly_excellent_points=record.monthly_excellent_points,
            base_points=record.base_points,
            bonus_points=record.bonus_points,
            total_points=record.total_points,
            mini_coins=record.mini_coins,
            salary_amount=record.salary_amount,
            remark=record.remark,
            archived=record.archived,
        )


@dataclass(frozen=True)
class SalaryReport:
    period: str
    generated_at: datetime
    salary_pool_total: int
    allocated_total: int
    remaining_amount: int
    details: list[MemberSalaryDetail]


@dataclass(frozen=True)
class MemberSalaryRank:
    user_id: int
    username: str
    total_points: int
    mini_coins: int


@dataclass(frozen=True)
class SalaryStats:
    """Pool usage for a period plus a mini-coin leaderboard."""

    period: str
    total_pool: int
    allocated: int
    remaining: int
    usage_rate: float
    ranking: list[MemberSalaryRank]


class SalaryReportService:
    def __init__(
        self,
        session: Session,
        *,
        records: SalaryRecordRepository | None = None,
        config_service: SalaryConfigService | None = None,
        members: MemberRepository | None = None,
    ) -> None:
        self._records = records or SalaryRecordRepository(session)
        self._config = config_service or SalaryConfigService(session)
        self._members = members or MemberRepository(session)

    def _load(self, period: str) -> list[SalaryRecord]:
        if not is_valid_period(period):
            raise ValidationError(f"周期格式不合法，应为 YYYY-MM，当前值: {period!r}")
        records = self._records.find_by_period(period)
        if not records:
            raise NotFoundError(f"周期 {period} 没有薪资记录", detail={"period": period})
        return records

    def generate_salary_report(self, period: str) -> SalaryReport:
        records = self._load(period)
        directory = self._members.find_by_ids(record.user_id for record in records)

        details = []
        for record in records:
            member = directory.get(record.user_id)
            details.append(
                MemberSalaryDetail.from_record(
                    record,
                    username=member.username if member else UNKNOWN,
                    role=member.role.value if member else UNKNOWN,
                )
            )

        pool_total = self._config.get_salary_pool_total()
        allocated = sum(record.mini_coins for record in records)
        LOGGER.debug("Report for %s: allocated %d of %d", period, allocated, pool_total)
        return SalaryReport(
            period=period,
            generated_at=datetime.now(),
            salary_pool_total=pool_total,
            allocated_total=allocated,
            remaining_amount=pool_total - allocated,
            details=details,
        )

    def get_salary_stats(self, period: str) -> SalaryStats:
        records = self._load(period)
        directory = self._members.find_by_ids(record.user_id for record in records)
        pool_total = self._config.get_salary_pool_total()
        allocated = sum(record.mini_coins for record in records)

        ranking = [
            MemberSalaryRank(
                user_id=record.user_id,
                username=directory[record.user_id].username if record.user_id in directory else UNKNOWN,
                total_points=record.total_points,
                mini_coins=record.mini_coins,
            )
            for record in sorted(records, key=lambda r: (-r.mini_coins, r.user_id))
        ]
        return SalaryStats(
            period=period,
            total_pool=pool_total,
            allocated=allocated,
            remaining=pool_total - allocated,
            usage_rate=(allocated / pool_total) if pool_total > 0 else 0.0,
            ranking=ranking,
        )
