"""Scoring of one member's contribution dimensions into points and mini-coins.

Everything here is pure: configuration arrives as a ``SalaryConfigSnapshot``
and nothing touches the database.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from compensation.core.errors import ValidationError
from compensation.domain import CalculationResult, CheckinTier, DimensionInput, SalaryConfigSnapshot

VIOLATION_HANDLING_POINTS_EACH = 3
ANNOUNCEMENT_POINTS_EACH = 5


@dataclass(frozen=True, slots=True)
class DimensionRule:
    field: str
    wire_name: str
    label: str
    minimum: int
    maximum: int | None = None

    def violation(self, value: int) -> str | None:
        if self.maximum is None:
            if value < self.minimum:
                return f"{self.label}({self.wire_name})不能为负数，当前值: {value}"
            return None
        if value < self.minimum or value > self.maximum:
            return (
                f"{self.label}({self.wire_name})超出范围，合法范围: "
                f"{self.minimum}-{self.maximum}，当前值: {value}"
            )
        return None


DIMENSION_RULES: tuple[DimensionRule, ...] = (
    DimensionRule("community_activity_points", "communityActivityPoints", "社群活跃度积分", 0, 100),
    DimensionRule("task_completion_points", "taskCompletionPoints", "任务完成积分", 0, 100),
    DimensionRule("violation_handling_count", "violationHandlingCount", "违规处理次数", 0),
    DimensionRule("announcement_count", "announcementCount", "公告发布次数", 0),
    DimensionRule("event_hosting_points", "eventHostingPoints", "活动举办积分", 0, 250),
    DimensionRule("birthday_bonus_points", "birthdayBonusPoints", "生日福利积分", 0, 25),
    DimensionRule("monthly_excellent_points", "monthlyExcellentPoints", "月度优秀评议积分", 0, 30),
)


def dimension_violations(dimensions: DimensionInput) -> list[str]:
    violations = []
    for rule in DIMENSION_RULES:
        message = rule.violation(getattr(dimensions, rule.field))
        if message is not None:
            violations.append(message)
    return violations


def validate_dimension_input(dimensions: DimensionInput) -> None:
    violations = dimension_violations(dimensions)
    if violations:
        raise ValidationError(violations)


def _matching_tier(count: int, tiers: Sequence[CheckinTier]) -> CheckinTier | None:
    count = max(count, 0)
    for tier in tiers:
        if tier.contains(count):
            return tier
    return None


def lookup_checkin_tier(count: int, tiers: Sequence[CheckinTier]) -> int:
    """Points of the first tier containing ``count``; 0 for a table with a gap."""

    tier = _matching_tier(count, tiers)
    return tier.points if tier is not None else 0


def lookup_checkin_level(count: int, tiers: Sequence[CheckinTier]) -> str | None:
    tier = _matching_tier(count, tiers)
    return tier.label if tier is not None else None


def calculate_member_points(
    dimensions: DimensionInput,
    config: SalaryConfigSnapshot,
    *,
    validate: bool = True,
) -> CalculationResult:
    if validate:
        validate_dimension_input(dimensions)

    checkin_points = lookup_checkin_tier(dimensions.checkin_count, config.checkin_tiers)
    violation_handling_points = dimensions.violation_handling_count * VIOLATION_HANDLING_POINTS_EACH
    announcement_points = dimensions.announcement_count * ANNOUNCEMENT_POINTS_EACH

    base_points = (
        dimensions.community_activity_points
        + checkin_points
        + violation_handling_points
        + dimensions.task_completion_points
        + announcement_points
    )
    bonus_points = (
        dimensions.event_hosting_points
        + dimensions.birthday_bonus_points
        + dimensions.monthly_excellent_points
    )
    total_points = base_points + bonus_points

    return CalculationResult(
        base_points=base_points,
        bonus_points=bonus_points,
        total_points=total_points,
        mini_coins=total_points * config.points_to_coins_ratio,
        checkin_points=checkin_points,
        violation_handling_points=violation_handling_points,
        announcement_points=announcement_points,
        checkin_level=lookup_checkin_level(dimensions.checkin_count, config.checkin_tiers),
    )
