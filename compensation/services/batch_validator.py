"""Checks a manually edited batch before the period manager persists it.

All violations are collected so a UI can highlight every problem at once.
"""
from __future__ import annotations

from collections import Counter
from typing import Sequence

from compensation.domain import (
    BatchValidationResult,
    FieldViolation,
    SalaryConfigSnapshot,
    SalaryRecordEdit,
)

from .dimension_calculator import DIMENSION_RULES


def validate_batch(
    edits: Sequence[SalaryRecordEdit],
    config: SalaryConfigSnapshot,
) -> BatchValidationResult:
    result = BatchValidationResult()
    min_coins, max_coins = config.mini_coins_min, config.mini_coins_max

    if len(edits) != config.formal_member_count:
        result.global_errors.append(
            f"正式成员数量不符，当前 {len(edits)} 条记录，要求 {config.formal_member_count} 条"
        )

    duplicated = sorted(user_id for user_id, seen in Counter(e.user_id for e in edits).items() if seen > 1)
    if duplicated:
        result.global_errors.append(
            "同一成员在批次中出现多次，用户ID: " + ", ".join(str(user_id) for user_id in duplicated)
        )

    for edit in edits:
        violations: list[FieldViolation] = []
        if edit.mini_coins < min_coins or edit.mini_coins > max_coins:
            violations.append(
                FieldViolation(
                    user_id=edit.user_id,
                    field="miniCoins",
                    message=f"迷你币 {edit.mini_coins} 不在 [{min_coins}, {max_coins}] 范围内",
                )
            )
        for rule in DIMENSION_RULES:
            value = edit.values.get(rule.field)
            if value is None:
                continue
            message = rule.violation(int(value))
            if message is not None:
                violations.append(
                    FieldViolation(user_id=edit.user_id, field=rule.wire_name, message=message)
                )
        if violations:
            result.errors.extend(violations)
            if edit.user_id not in result.violating_user_ids:
                result.violating_user_ids.append(edit.user_id)

    total = sum(edit.mini_coins for edit in edits)
    if total > config.salary_pool_total:
        result.global_errors.append(f"迷你币总额 {total} 超过薪资池上限 {config.salary_pool_total}")

    return result
