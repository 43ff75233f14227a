"""Config store: typed, validated access to the ``salary_config`` table."""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Iterable, Mapping

from sqlalchemy.orm import Session

from compensation.core.errors import CompensationError, ValidationError
from compensation.core.logger import get_logger
from compensation.db.session import unit_of_work
from compensation.domain import CheckinTier, RotationThresholds, SalaryConfigSnapshot
from compensation.repositories import SalaryConfigRepository

LOGGER = get_logger(__name__)

SALARY_POOL_TOTAL = "salary_pool_total"
FORMAL_MEMBER_COUNT = "formal_member_count"
BASE_ALLOCATION = "base_allocation"
MINI_COINS_MIN = "mini_coins_min"
MINI_COINS_MAX = "mini_coins_max"
POINTS_TO_COINS_RATIO = "points_to_coins_ratio"
CHECKIN_TIERS = "checkin_tiers"
PROMOTION_POINTS_THRESHOLD = "promotion_points_threshold"
DEMOTION_SALARY_THRESHOLD = "demotion_salary_threshold"
DEMOTION_CONSECUTIVE_MONTHS = "demotion_consecutive_months"
DISMISSAL_POINTS_THRESHOLD = "dismissal_points_threshold"
DISMISSAL_CONSECUTIVE_MONTHS = "dismissal_consecutive_months"

DEFAULT_CHECKIN_TIERS: tuple[CheckinTier, ...] = (
    CheckinTier(0, 19, -20, "不合格"),
    CheckinTier(20, 29, -10, "需改进"),
    CheckinTier(30, 39, 0, "合格"),
    CheckinTier(40, 49, 30, "良好"),
    CheckinTier(50, 999, 50, "优秀"),
)

DEFAULTS: dict[str, int] = {
    SALARY_POOL_TOTAL: 2000,
    FORMAL_MEMBER_COUNT: 5,
    BASE_ALLOCATION: 400,
    MINI_COINS_MIN: 200,
    MINI_COINS_MAX: 400,
    POINTS_TO_COINS_RATIO: 2,
    PROMOTION_POINTS_THRESHOLD: 100,
    DEMOTION_SALARY_THRESHOLD: 150,
    DEMOTION_CONSECUTIVE_MONTHS: 2,
    DISMISSAL_POINTS_THRESHOLD: 100,
    DISMISSAL_CONSECUTIVE_MONTHS: 2,
}

_NON_NEGATIVE_THRESHOLDS: tuple[tuple[str, str], ...] = (
    (PROMOTION_POINTS_THRESHOLD, "转正积分阈值"),
    (DEMOTION_SALARY_THRESHOLD, "降级薪酬阈值"),
    (DISMISSAL_POINTS_THRESHOLD, "开除积分阈值"),
)


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def serialize_tiers(tiers: Iterable[CheckinTier]) -> str:
    return json.dumps([tier.to_dict() for tier in tiers], ensure_ascii=False)


def parse_tiers(raw: str) -> list[CheckinTier]:
    """Decode the stored tier table; raises ``ValueError`` on malformed input."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"签到奖惩表不是合法的 JSON: {exc.msg}") from exc
    if not isinstance(payload, list):
        raise ValueError("签到奖惩表必须是列表")
    try:
        return [CheckinTier.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"签到奖惩表条目格式错误: {exc}") from exc


def tier_table_violations(tiers: list[CheckinTier]) -> list[str]:
    """List every way ``tiers`` fails to cover ``[0, ∞)`` with ascending contiguous ranges."""

    if not tiers:
        return ["签到奖惩表不能为空"]
    violations: list[str] = []
    if tiers[0].min_count != 0:
        violations.append(f"签到奖惩表必须从 0 次开始，当前起点: {tiers[0].min_count}")
    for index, tier in enumerate(tiers):
        if tier.min_count > tier.max_count:
            violations.append(
                f"第 {index + 1} 档最小次数({tier.min_count})大于最大次数({tier.max_count})"
            )
        if index > 0:
            previous = tiers[index - 1]
            if tier.min_count != previous.max_count + 1:
                violations.append(
                    f"第 {index + 1} 档起点({tier.min_count})未与上一档终点({previous.max_count})衔接"
                )
    return violations


class SalaryConfigService:
    """Read and write business configuration.

    ``save_config`` validates the union of stored and incoming values before
    writing anything, so a rejected save leaves the table untouched.
    """

    def __init__(
        self,
        session: Session,
        *,
        repository: SalaryConfigRepository | None = None,
    ) -> None:
        self._session = session
        self._repository = repository or SalaryConfigRepository(session)

    def get_all_config(self) -> dict[str, str]:
        return {entry.config_key: entry.config_value for entry in self._repository.find_all()}

    def get_config_value(self, key: str, default: str | None = None) -> str | None:
        entry = self._repository.find_by_key(key)
        return entry.config_value if entry is not None else default

    def get_int_config(self, key: str, default: int) -> int:
        parsed = _parse_int(self.get_config_value(key))
        return default if parsed is None else parsed

    def save_config(self, config_map: Mapping[str, str]) -> None:
        incoming = {str(key): str(value) for key, value in config_map.items()}
        self.validate_config(incoming)
        now = datetime.now()
        with unit_of_work(self._session):
            for key, value in incoming.items():
                self._repository.upsert(key, value, now=now)
        LOGGER.info("Saved %d config keys: %s", len(incoming), ", ".join(sorted(incoming)))

    def validate_config(self, incoming: Mapping[str, str]) -> None:
        """Raise ``ValidationError`` listing every rule the merged config breaks."""

        violations: list[str] = []

        for key in incoming:
            if key in DEFAULTS and _parse_int(incoming[key]) is None:
                violations.append(f"配置项 {key} 必须为整数，当前值: {incoming[key]!r}")

        mini_min = self._resolve_int(incoming, MINI_COINS_MIN)
        mini_max = self._resolve_int(incoming, MINI_COINS_MAX)
        if mini_min > mini_max:
            violations.append(f"个人最低迷你币({mini_min})不能大于个人最高迷你币({mini_max})")

        base_allocation = self._resolve_int(incoming, BASE_ALLOCATION)
        member_count = self._resolve_int(incoming, FORMAL_MEMBER_COUNT)
        pool_total = self._resolve_int(incoming, SALARY_POOL_TOTAL)
        allocation_total = base_allocation * member_count
        if allocation_total > pool_total:
            violations.append(
                f"基准分配额({base_allocation}) × 正式成员数({member_count}) = "
                f"{allocation_total} 超过薪酬池总额({pool_total})"
            )

        for key, label in _NON_NEGATIVE_THRESHOLDS:
            if key in incoming:
                value = _parse_int(incoming[key])
                if value is not None and value < 0:
                    violations.append(f"{label}不能为负数: {value}")

        if CHECKIN_TIERS in incoming:
            try:
                violations.extend(tier_table_violations(parse_tiers(incoming[CHECKIN_TIERS])))
            except ValueError as exc:
                violations.append(str(exc))

        if violations:
            LOGGER.warning("Rejected config save: %s", "; ".join(violations))
            raise ValidationError(violations)

    def _resolve_int(self, incoming: Mapping[str, str], key: str) -> int:
        """Incoming value first, then the stored one, then the built-in default."""

        if key in incoming:
            parsed = _parse_int(incoming[key])
            if parsed is not None:
                return parsed
        return self.get_int_config(key, DEFAULTS[key])

    def get_salary_pool_total(self) -> int:
        return self.get_int_config(SALARY_POOL_TOTAL, DEFAULTS[SALARY_POOL_TOTAL])

    def get_formal_member_count(self) -> int:
        return self.get_int_config(FORMAL_MEMBER_COUNT, DEFAULTS[FORMAL_MEMBER_COUNT])

    def get_base_allocation(self) -> int:
        return self.get_int_config(BASE_ALLOCATION, DEFAULTS[BASE_ALLOCATION])

    def get_mini_coins_range(self) -> tuple[int, int]:
        return (
            self.get_int_config(MINI_COINS_MIN, DEFAULTS[MINI_COINS_MIN]),
            self.get_int_config(MINI_COINS_MAX, DEFAULTS[MINI_COINS_MAX]),
        )

    def get_points_to_coins_ratio(self) -> int:
        return self.get_int_config(POINTS_TO_COINS_RATIO, DEFAULTS[POINTS_TO_COINS_RATIO])

    def get_checkin_tiers(self) -> list[CheckinTier]:
        raw = self.get_config_value(CHECKIN_TIERS)
        if raw is None:
            return list(DEFAULT_CHECKIN_TIERS)
        try:
            return parse_tiers(raw)
        except ValueError as exc:
            raise CompensationError(
                f"签到奖惩表配置解析失败: {exc}", status_code=500, code="CONFIG_CORRUPT"
            ) from exc

    def save_checkin_tiers(self, tiers: Iterable[CheckinTier]) -> None:
        self.save_config({CHECKIN_TIERS: serialize_tiers(tiers)})

    def get_rotation_thresholds(self) -> RotationThresholds:
        return RotationThresholds(
            promotion_points_threshold=self._int_or_default(PROMOTION_POINTS_THRESHOLD),
            demotion_salary_threshold=self._int_or_default(DEMOTION_SALARY_THRESHOLD),
            demotion_consecutive_months=self._int_or_default(DEMOTION_CONSECUTIVE_MONTHS),
            dismissal_points_threshold=self._int_or_default(DISMISSAL_POINTS_THRESHOLD),
            dismissal_consecutive_months=self._int_or_default(DISMISSAL_CONSECUTIVE_MONTHS),
        )

    def _int_or_default(self, key: str) -> int:
        return self.get_int_config(key, DEFAULTS[key])

    def snapshot(self) -> SalaryConfigSnapshot:
        """Capture every value a calculation needs in one read."""

        stored: dict[str, Any] = self.get_all_config()

        def _int(key: str) -> int:
            parsed = _parse_int(stored.get(key))
            return DEFAULTS[key] if parsed is None else parsed

        raw_tiers = stored.get(CHECKIN_TIERS)
        try:
            tiers = tuple(parse_tiers(raw_tiers)) if raw_tiers is not None else DEFAULT_CHECKIN_TIERS
        except ValueError as exc:
            raise CompensationError(
                f"签到奖惩表配置解析失败: {exc}", status_code=500, code="CONFIG_CORRUPT"
            ) from exc

        return SalaryConfigSnapshot(
            salary_pool_total=_int(SALARY_POOL_TOTAL),
            formal_member_count=_int(FORMAL_MEMBER_COUNT),
            base_allocation=_int(BASE_ALLOCATION),
            mini_coins_min=_int(MINI_COINS_MIN),
            mini_coins_max=_int(MINI_COINS_MAX),
            points_to_coins_ratio=_int(POINTS_TO_COINS_RATIO),
            checkin_tiers=tiers,
            rotation_thresholds=RotationThresholds(
                promotion_points_threshold=_int(PROMOTION_POINTS_THRESHOLD),
                demotion_salary_threshold=_int(DEMOTION_SALARY_THRESHOLD),
                demotion_consecutive_months=_int(DEMOTION_CONSECUTIVE_MONTHS),
                dismissal_points_threshold=_int(DISMISSAL_POINTS_THRESHOLD),
                dismissal_consecutive_months=_int(DISMISSAL_CONSECUTIVE_MONTHS),
            ),
        )

    def seed_defaults(self) -> list[str]:
        """Store the built-in default for every key that has no row yet."""

        stored = self.get_all_config()
        defaults = {key: str(value) for key, value in DEFAULTS.items()}
        defaults[CHECKIN_TIERS] = serialize_tiers(DEFAULT_CHECKIN_TIERS)
        missing = {key: value for key, value in defaults.items() if key not in stored}
        if not missing:
            return []
        now = datetime.now()
        with unit_of_work(self._session):
            for key, value in missing.items():
                self._repository.upsert(key, value, now=now)
        LOGGER.info("Seeded %d default config keys", len(missing))
        return sorted(missing)
