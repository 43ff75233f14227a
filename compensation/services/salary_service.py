"""Period manager: lifecycle, calculation and manual edits of salary records.

A period moves from absent to active when ``create_period`` seeds one record
per salaried member, and from active to archived when
``archive_salary_records`` freezes it. Archived is terminal: calculation,
batch save and archive all refuse to touch a period that holds an archived
record. Every mutating call runs under the period's lock as one unit of work.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from compensation.core.errors import (
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)
from compensation.core.locks import PeriodLocks, period_locks
from compensation.core.logger import get_logger, log_context, timeit
from compensation.core.periods import is_valid_period
from compensation.db.session import unit_of_work
from compensation.domain import (
    BatchSaveResult,
    CalculationResult,
    DimensionInput,
    PeriodSummary,
    SalaryRecordEdit,
)
from compensation.models import DERIVED_FIELDS, DIMENSION_FIELDS, SALARY_ROLES, Member, SalaryRecord
from compensation.repositories import (
    AuditLogRepository,
    MemberRepository,
    SalaryRecordRepository,
)

from .batch_validator import validate_batch
from .dimension_calculator import (
    calculate_member_points,
    dimension_violations,
    validate_dimension_input,
)
from .pool_distribution import distribute
from .salary_config import SalaryConfigService

LOGGER = get_logger(__name__)

AUDIT_ARCHIVE = "SALARY_ARCHIVE"
AUDIT_BATCH_SAVE = "SALARY_BATCH_SAVE"
STALE_VERSION_MESSAGE = "并发修改冲突，请刷新后重试"

# ``mini_coins`` is editable too but goes through ``set_mini_coins``.
EDITABLE_FIELDS: frozenset[str] = frozenset(DIMENSION_FIELDS + DERIVED_FIELDS + ("remark",)) - {
    "mini_coins"
}

_ROLE_ORDER = {role: index for index, role in enumerate(SALARY_ROLES)}


@dataclass(frozen=True)
class SalaryMemberRow:
    """A salaried member paired with their record in the viewed period, if any."""

    member: Member
    record: SalaryRecord | None


def _require_period(period: str) -> None:
    if not is_valid_period(period):
        raise ValidationError(f"周期格式不合法，应为 YYYY-MM，当前值: {period!r}")


def _zero_record(user_id: int, period: str) -> SalaryRecord:
    record = SalaryRecord(user_id=user_id, period=period, archived=False, remark=None)
    for name in DIMENSION_FIELDS + DERIVED_FIELDS:
        setattr(record, name, 0)
    record.salary_amount = Decimal(0)
    return record


class SalaryService:
    """Facade over salary records for one request's session."""

    def __init__(
        self,
        session: Session,
        *,
        records: SalaryRecordRepository | None = None,
        config_service: SalaryConfigService | None = None,
        members: MemberRepository | None = None,
        audit_log: AuditLogRepository | None = None,
        locks: PeriodLocks | None = None,
    ) -> None:
        self._session = session
        self._records = records or SalaryRecordRepository(session)
        self._config = config_service or SalaryConfigService(session)
        self._members = members or MemberRepository(session)
        self._audit_log = audit_log or AuditLogRepository(session)
        self._locks = locks or period_locks

    # -- period lifecycle -------------------------------------------------

    def create_period(self, period: str) -> list[SalaryRecord]:
        _require_period(period)
        with log_context.scoped(period=period), self._locks.hold(period):
            if self._records.count_by_period(period) > 0:
                LOGGER.warning("Refused to create period that already has records")
                raise ConflictError(f"周期 {period} 已存在薪酬记录")

            members = self._members.find_formal_members()
            with timeit("Create salary period", logger=LOGGER, total=len(members)):
                try:
                    with unit_of_work(self._session):
                        records = list(
                            self._records.add_all(_zero_record(m.id, period) for m in members)
                        )
                except IntegrityError as exc:
                    raise ConflictError(f"周期 {period} 已存在薪酬记录") from exc
        return records

    def get_latest_active_period(self) -> str | None:
        return max(self._records.distinct_active_periods(), default=None)

    def get_period_list(self) -> list[PeriodSummary]:
        return [
            PeriodSummary(
                period=row.period,
                archived=row.record_count > 0 and row.archived_count == row.record_count,
                record_count=row.record_count,
            )
            for row in self._records.period_counts()
        ]

    def _ensure_writable(self, period: str) -> None:
        if self._records.exists_archived_in_period(period):
            LOGGER.warning("Rejected write against archived period %s", period)
            raise StateError(f"周期 {period} 已归档，不允许修改", detail={"period": period})

    # -- calculation ------------------------------------------------------

    def calculate_member_points(self, dimensions: DimensionInput) -> CalculationResult:
        """Score one member's dimensions against the current configuration."""

        return calculate_member_points(dimensions, self._config.snapshot())

    def calculate_and_distribute(self, period: str) -> list[SalaryRecord]:
        _require_period(period)
        with log_context.scoped(period=period), self._locks.hold(period):
            self._ensure_writable(period)
            records = self._records.find_unarchived_by_period(period)
            if not records:
                raise NotFoundError(f"周期 {period} 没有未归档的薪资记录，请先创建周期并录入数据")

            config = self._config.snapshot()
            violations = []
            for record in records:
                violations.extend(
                    f"成员(userId={record.user_id}) {message}"
                    for message in dimension_violations(DimensionInput.from_record(record))
                )
            if violations:
                raise ValidationError(violations)

            with timeit("Calculate and distribute", logger=LOGGER, total=len(records)):
                results = [
                    calculate_member_points(DimensionInput.from_record(record), config, validate=False)
                    for record in records
                ]
                final_coins = distribute([result.mini_coins for result in results], config)

                with unit_of_work(self._session):
                    for record, result, coins in zip(records, results, final_coins):
                        record.checkin_points = result.checkin_points
                        record.violation_handling_points = result.violation_handling_points
                        record.announcement_points = result.announcement_points
                        record.base_points = result.base_points
                        record.bonus_points = result.bonus_points
                        record.total_points = result.total_points
                        record.set_mini_coins(coins)
                    self._session.flush()

            LOGGER.info(
                "Distributed %d mini-coins across %d members (pool %d)",
                sum(final_coins),
                len(records),
                config.salary_pool_total,
            )
        return records

    # -- reads ------------------------------------------------------------

    def get_salary_list(self, period: str | None = None) -> list[SalaryRecord]:
        if period is None:
            return self._records.find_all()
        _require_period(period)
        return self._records.find_by_period(period)

    def get_salary_members(self, period: str | None = None) -> list[SalaryMemberRow]:
        """Salaried members, leader first, each joined with their record in ``period``.

        Without an explicit period the latest active one is shown.
        """

        if period is None:
            period = self.get_latest_active_period()
        else:
            _require_period(period)

        by_user: dict[int, SalaryRecord] = {}
        if period is not None:
            by_user = {record.user_id: record for record in self._records.find_by_period(period)}

        members = sorted(
            self._members.find_formal_members(),
            key=lambda member: (_ROLE_ORDER.get(member.role, len(_ROLE_ORDER)), member.id),
        )
        return [SalaryMemberRow(member=member, record=by_user.get(member.id)) for member in members]

    # -- manual edits -----------------------------------------------------

    def update_salary_record(
        self,
        record_id: int,
        changes: Mapping[str, Any],
        *,
        version: int | None = None,
    ) -> SalaryRecord:
        record = self._records.get(record_id)
        if record is None:
            raise NotFoundError("薪资记录不存在", detail={"id": record_id})

        updates = {key: value for key, value in changes.items() if value is not None}
        unknown = sorted(set(updates) - EDITABLE_FIELDS - {"mini_coins"})
        if unknown:
            raise ValidationError(f"不允许修改的字段: {', '.join(unknown)}")

        with log_context.scoped(period=record.period), self._locks.hold(record.period):
            if record.archived:
                raise StateError(f"周期 {record.period} 已归档，不允许修改", detail={"period": record.period})
            if version is not None and version != record.version:
                raise ConflictError(STALE_VERSION_MESSAGE, detail={"id": record_id})

            merged = {name: getattr(record, name) for name in DIMENSION_FIELDS}
            merged.update({k: v for k, v in updates.items() if k in DIMENSION_FIELDS})
            validate_dimension_input(DimensionInput(**merged))

            try:
                with unit_of_work(self._session):
                    self._apply(record, updates)
                    self._session.flush()
            except StaleDataError as exc:
                raise ConflictError(STALE_VERSION_MESSAGE, detail={"id": record_id}) from exc

        LOGGER.info("Updated salary record %s (user %s)", record.id, record.user_id)
        return record

    @staticmethod
    def _apply(record: SalaryRecord, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            if name == "mini_coins":
                record.set_mini_coins(int(value))
            elif name in EDITABLE_FIELDS and value is not None:
                setattr(record, name, value)

    def batch_save_with_validation(
        self,
        edits: Sequence[SalaryRecordEdit],
        operator_id: int,
        period: str,
    ) -> BatchSaveResult:
        _require_period(period)
        with log_context.scoped(period=period, operator=operator_id), self._locks.hold(period):
            self._ensure_writable(period)

            validation = validate_batch(edits, self._config.snapshot())
            if not validation.success:
                LOGGER.warning(
                    "Batch save rejected: %s; %d field violations",
                    validation.global_error or "no global error",
                    len(validation.errors),
                )
                return BatchSaveResult(
                    success=False,
                    global_error=validation.global_error,
                    errors=tuple(validation.errors),
                    violating_user_ids=tuple(validation.violating_user_ids),
                )

            existing = {record.user_id: record for record in self._records.find_by_period(period)}
            stale = [
                edit.user_id
                for edit in edits
                if edit.version is not None
                and edit.user_id in existing
                and existing[edit.user_id].version != edit.version
            ]
            if stale:
                return self._stale_result(stale)

            try:
                with unit_of_work(self._session):
                    saved = []
                    for edit in edits:
                        record = existing.get(edit.user_id)
                        if record is None:
                            record = _zero_record(edit.user_id, period)
                            self._session.add(record)
                        self._apply(record, {**edit.values, "mini_coins": edit.mini_coins})
                        saved.append(record)
                    self._session.flush()
                    self._audit_log.record(
                        operator_id,
                        AUDIT_BATCH_SAVE,
                        f"批量保存 {period} 薪资记录 {len(saved)} 条，用户ID: "
                        + ", ".join(str(record.user_id) for record in saved),
                    )
            except StaleDataError:
                return self._stale_result([edit.user_id for edit in edits])
            except IntegrityError as exc:
                raise ConflictError(f"周期 {period} 的成员记录已被并发创建，请刷新后重试") from exc

            LOGGER.info("Batch saved %d salary records", len(saved))
        return BatchSaveResult(success=True, saved_records=tuple(saved))

    @staticmethod
    def _stale_result(user_ids: Sequence[int]) -> BatchSaveResult:
        LOGGER.warning("Batch save hit stale versions for users %s", list(user_ids))
        return BatchSaveResult(
            success=False,
            global_error=STALE_VERSION_MESSAGE,
            violating_user_ids=tuple(user_ids),
        )

    # -- archival ---------------------------------------------------------

    def archive_salary_records(self, operator_id: int, period: str) -> int:
        _require_period(period)
        with log_context.scoped(period=period, operator=operator_id), self._locks.hold(period):
            self._ensure_writable(period)
            records = self._records.find_unarchived_by_period(period)
            if not records:
                LOGGER.info("Nothing to archive")
                return 0

            archived_at = datetime.now().replace(microsecond=0)
            with unit_of_work(self._session):
                for record in records:
                    record.archived = True
                    record.archived_at = archived_at
                self._session.flush()
                self._audit_log.record(
                    operator_id,
                    AUDIT_ARCHIVE,
                    f"归档 {period} 薪资记录 {len(records)} 条，用户ID: "
                    + ", ".join(str(record.user_id) for record in records),
                    at=archived_at,
                )
            LOGGER.info("Archived %d salary records", len(records))
        return len(records)
