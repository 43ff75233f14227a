"""Request and response bodies for the salary endpoints."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from compensation.domain import DimensionInput, SalaryRecordEdit


class CamelModel(BaseModel):
    """Accept and emit camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SalaryRecordOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    user_id: int
    period: str
    community_activity_points: int = 0
    checkin_count: int = 0
    checkin_points: int = 0
    violation_handling_count: int = 0
    violation_handling_points: int = 0
    task_completion_points: int = 0
    announcement_count: int = 0
    announcement_points: int = 0
    event_hosting_points: int = 0
    birthday_bonus_points: int = 0
    monthly_excellent_points: int = 0
    base_points: int = 0
    bonus_points: int = 0
    total_points: int = 0
    mini_coins: int = 0
    salary_amount: Decimal = Decimal("0")
    remark: str | None = None
    archived: bool = False
    archived_at: datetime | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_serializer("salary_amount")
    def _serialize_amount(self, value: Decimal) -> str:
        return str(value)


class DimensionInputIn(CamelModel):
    community_activity_points: int = 0
    checkin_count: int = 0
    violation_handling_count: int = 0
    task_completion_points: int = 0
    announcement_count: int = 0
    event_hosting_points: int = 0
    birthday_bonus_points: int = 0
    monthly_excellent_points: int = 0

    def to_domain(self) -> DimensionInput:
        return DimensionInput(**self.model_dump())


class CalculationResultOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    base_points: int
    bonus_points: int
    total_points: int
    mini_coins: int
    checkin_points: int
    violation_handling_points: int
    announcement_points: int
    checkin_level: str | None = None


class SalaryRecordUpdate(CamelModel):
    """Partial update of one record; ``None`` fields are left untouched."""

    version: int | None = None
    community_activity_points: int | None = None
    checkin_count: int | None = None
    checkin_points: int | None = None
    violation_handling_count: int | None = None
    violation_handling_points: int | None = None
    task_completion_points: int | None = None
    announcement_count: int | None = None
    announcement_points: int | None = None
    event_hosting_points: int | None = None
    birthday_bonus_points: int | None = None
    monthly_excellent_points: int | None = None
    base_points: int | None = None
    bonus_points: int | None = None
    total_points: int | None = None
    mini_coins: int | None = None
    remark: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude={"version"}, exclude_none=True)


class BatchRecordIn(SalaryRecordUpdate):
    user_id: int
    mini_coins: int

    def to_edit(self) -> SalaryRecordEdit:
        values = self.model_dump(exclude={"version", "user_id", "mini_coins"}, exclude_none=True)
        return SalaryRecordEdit(
            user_id=self.user_id,
            mini_coins=self.mini_coins,
            version=self.version,
            values=values,
        )


class BatchSaveRequest(CamelModel):
    period: str
    operator_id: int
    records: list[BatchRecordIn] = Field(default_factory=list)


class ViolationOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    user_id: int
    field: str
    message: str


class BatchSaveResponse(CamelModel):
    success: bool
    saved_records: list[SalaryRecordOut] = Field(default_factory=list)
    global_error: str | None = None
    errors: list[ViolationOut] = Field(default_factory=list)
    violating_user_ids: list[int] = Field(default_factory=list)


class CreatePeriodRequest(CamelModel):
    period: str


class ArchiveRequest(CamelModel):
    period: str
    operator_id: int


class ArchiveResponse(CamelModel):
    period: str
    archived_count: int


class PeriodOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    period: str
    archived: bool
    record_count: int


class SalaryMemberOut(CamelModel):
    """A salaried member with their record in the viewed period, when one exists."""

    user_id: int
    username: str
    role: str
    record: SalaryRecordOut | None = None


class MemberSalaryDetailOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

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
    remark: str | None = None
    archived: bool

    @field_serializer("salary_amount")
    def _serialize_amount(self, value: Decimal) -> str:
        return str(value)


class SalaryReportOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    period: str
    generated_at: datetime
    salary_pool_total: int
    allocated_total: int
    remaining_amount: int
    details: list[MemberSalaryDetailOut]


class MemberSalaryRankOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    user_id: int
    username: str
    total_points: int
    mini_coins: int


class SalaryStatsOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    period: str
    total_pool: int
    allocated: int
    remaining: int
    usage_rate: float
    ranking: list[MemberSalaryRankOut]
