from datetime import datetime
from decimal import Decimal

from compensation.schemas import MemberSalaryDetailOut, SalaryRecordOut
from compensation.services.salary_report import MemberSalaryDetail


def test_salary_record_amount_is_serialised_as_text() -> None:
    record = SalaryRecordOut(id=1, user_id=7, period="2024-05", mini_coins=400, salary_amount=Decimal("400"))

    payload = record.model_dump(mode="json", by_alias=True)

    assert payload["miniCoins"] == 400
    assert payload["salaryAmount"] == "400"


def test_report_detail_amount_is_serialised_as_text() -> None:
    detail = MemberSalaryDetail(
        user_id=7,
        username="leader",
        role="LEADER",
        community_activity_points=100,
        checkin_count=50,
        checkin_points=50,
        violation_handling_count=0,
        violation_handling_points=0,
        task_completion_points=100,
        announcement_count=0,
        announcement_points=0,
        event_hosting_points=0,
        birthday_bonus_points=0,
        monthly_excellent_points=0,
        base_points=250,
        bonus_points=0,
        total_points=250,
        mini_coins=400,
        salary_amount=Decimal("400.00"),
        remark=None,
        archived=False,
    )

    payload = MemberSalaryDetailOut.model_validate(detail).model_dump(mode="json", by_alias=True)

    assert payload["salaryAmount"] == "400.00"
    assert payload["userId"] == 7


def test_record_out_reads_timestamps() -> None:
    created = datetime(2024, 5, 1, 9, 30)

    payload = SalaryRecordOut(id=1, user_id=7, period="2024-05", created_at=created).model_dump(by_alias=True)

    assert payload["createdAt"] == created
    assert payload["salaryAmount"] == "0"
