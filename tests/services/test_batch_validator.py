"""Tests for checking a manually edited batch."""
from __future__ import annotations

from dataclasses import replace

from compensation.domain import SalaryRecordEdit
from compensation.services.batch_validator import validate_batch


def _edits(*coins: int) -> list[SalaryRecordEdit]:
    return [SalaryRecordEdit(user_id=index + 1, mini_coins=value) for index, value in enumerate(coins)]


def test_valid_batch_passes(snapshot) -> None:
    result = validate_batch(_edits(400, 400, 400, 400, 400), snapshot)

    assert result.success
    assert result.global_error is None
    assert result.errors == []
    assert result.violating_user_ids == []


def test_out_of_range_coins_are_collected_per_member(snapshot) -> None:
    result = validate_batch(_edits(150, 400, 401, 300, 200), snapshot)

    assert not result.success
    assert result.global_error is None
    assert [(v.user_id, v.field) for v in result.errors] == [(1, "miniCoins"), (3, "miniCoins")]
    assert result.violating_user_ids == [1, 3]


def test_member_count_mismatch_is_a_global_error(snapshot) -> None:
    result = validate_batch(_edits(300, 300, 300), snapshot)

    assert not result.success
    assert "正式成员数量不符" in result.global_error
    assert result.errors == []


def test_all_violations_are_reported_together(snapshot) -> None:
    edits = _edits(100, 300, 300, 300)
    edits.append(
        SalaryRecordEdit(user_id=9, mini_coins=300, values={"community_activity_points": 120})
    )

    result = validate_batch(edits, snapshot)

    assert "正式成员数量不符" not in (result.global_error or "")
    fields = {(v.user_id, v.field) for v in result.errors}
    assert fields == {(1, "miniCoins"), (9, "communityActivityPoints")}
    assert result.violating_user_ids == [1, 9]


def test_total_over_pool_and_duplicates_are_global_errors(snapshot) -> None:
    edits = [
        SalaryRecordEdit(user_id=1, mini_coins=400),
        SalaryRecordEdit(user_id=1, mini_coins=400),
        SalaryRecordEdit(user_id=2, mini_coins=400),
        SalaryRecordEdit(user_id=3, mini_coins=400),
        SalaryRecordEdit(user_id=4, mini_coins=400),
    ]
    over_pool = validate_batch(edits, replace(snapshot, salary_pool_total=1900))

    assert len(over_pool.global_errors) == 2
    assert "多次" in over_pool.global_errors[0]
    assert "超过薪资池上限" in over_pool.global_errors[1]
    assert over_pool.global_error == "；".join(over_pool.global_errors)