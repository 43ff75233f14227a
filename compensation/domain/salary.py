"""Value objects shared by the scoring, distribution and period services."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence


@dataclass(frozen=True, slots=True)
class CheckinTier:
    """One row of the checkin reward table, bounds inclusive."""

    min_count: int
    max_count: int
    points: int
    label: str = ""

    def contains(self, count: int) -> bool:
        return self.min_count <= count <= self.max_count

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CheckinTier":
        return cls(
            min_count=int(data["minCount"]),
            max_count=int(data["maxCount"]),
            points=int(data["points"]),
            label=str(data.get("label") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "minCount": self.min_count,
            "maxCount": self.max_count,
            "points": self.points,
            "label": self.label,
        }


@dataclass(frozen=True, slots=True)
class RotationThresholds:
    promotion_points_threshold: int
    demotion_salary_threshold: int
    demotion_consecutive_months: int
    dismissal_points_threshold: int
    dismissal_consecutive_months: int


@dataclass(frozen=True, slots=True)
class SalaryConfigSnapshot:
    """Business configuration captured once and passed through a computation.

    Captured once per operation; every step of a calculation sees the same values.
    """

    salary_pool_total: int
    formal_member_count: int
    base_allocation: int
    mini_coins_min: int
    mini_coins_max: int
    points_to_coins_ratio: int
    checkin_tiers: tuple[CheckinTier, ...]
    rotation_thresholds: RotationThresholds


@dataclass(frozen=True, slots=True)
class DimensionInput:
    """Raw contribution counters for one member."""

    community_activity_points: int = 0
    checkin_count: int = 0
    violation_handling_count: int = 0
    task_completion_points: int = 0
    announcement_count: int = 0
    event_hosting_points: int = 0
    birthday_bonus_points: int = 0
    monthly_excellent_points: int = 0

    @classmethod
    def from_record(cls, record: object) -> "DimensionInput":
        return cls(
            community_activity_points=int(getattr(record, "community_activity_points") or 0),
            checkin_count=int(getattr(record, "checkin_count") or 0),
            violation_handling_count=int(getattr(record, "violation_handling_count") or 0),
            task_completion_points=int(getattr(record, "task_completion_points") or 0),
            announcement_count=int(getattr(record, "announcement_count") or 0),
            event_hosting_points=int(getattr(record, "event_hosting_points") or 0),
            birthday_bonus_points=int(getattr(record, "birthday_bonus_points") or 0),
            monthly_excellent_points=int(getattr(record, "monthly_excellent_points") or 0),
        )


@dataclass(frozen=True, slots=True)
class CalculationResult:
    """Points and mini-coins derived from one member's dimensions."""

    base_points: int
    bonus_points: int
    total_points: int
    mini_coins: int
    checkin_points: int
    violation_handling_points: int
    announcement_points: int
    checkin_level: str | None = None


@dataclass(frozen=True, slots=True)
class PeriodSummary:
    period: str
    archived: bool
    record_count: int


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A rejected value in a batch edit, addressed for UI highlighting."""

    user_id: int
    field: str
    message: str


@dataclass(slots=True)
class BatchValidationResult:
    """Outcome of checking a batch edit; empty collections mean it passed."""

    global_errors: list[str] = field(default_factory=list)
    errors: list[FieldViolation] = field(default_factory=list)
    violating_user_ids: list[int] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.global_errors and not self.errors

    @property
    def global_error(self) -> str | None:
        if not self.global_errors:
            return None
        return "；".join(self.global_errors)


@dataclass(frozen=True, slots=True)
class BatchSaveResult:
    success: bool
    saved_records: Sequence[Any] = ()
    global_error: str | None = None
    errors: Sequence[FieldViolation] = ()
    violating_user_ids: Sequence[int] = ()


@dataclass(frozen=True, slots=True)
class SalaryRecordEdit:
    """A manually edited record submitted in a batch save.

    ``values`` holds any other editable columns by their attribute name.
    """

    user_id: int
    mini_coins: int
    version: int | None = None
    values: Mapping[str, Any] = field(default_factory=dict)
