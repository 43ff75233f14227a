"""Service tests against autospecced repositories, without a database."""
from __future__ import annotations

from decimal import Decimal
from unittest.mock import create_autospec

import pytest
from sqlalchemy.orm import Session

from compensation.core.errors import ConflictError, StateError
from compensation.core.locks import PeriodLocks
from compensation.models import SalaryRecord
from compensation.repositories import AuditLogRepository, MemberRepository, SalaryRecordRepository
from compensation.services import SalaryConfigService, SalaryReportService, SalaryService


def _service(records: SalaryRecordRepository, **overrides) -> tuple[SalaryService, Session]:
    session = create_autospec(Session, instance=True)
    service = SalaryService(
        session,
        records=records,
        config_service=overrides.get("config_service") or create_autospec(SalaryConfigService, instance=True),
        members=overrides.get("members") or create_autospec(MemberRepository, instance=True),
        audit_log=overrides.get("audit_log") or create_autospec(AuditLogRepository, instance=True),
        locks=PeriodLocks(),
    )
    return service, session


def test_create_period_conflict_touches_nothing() -> None:
    records = create_autospec(SalaryRecordRepository, instance=True)
    records.count_by_period.return_value = 3
    members = create_autospec(MemberRepository, instance=True)
    service, session = _service(records, members=members)

    with pytest.raises(ConflictError):
        service.create_period("2024-05")

    members.find_formal_members.assert_not_called()
    records.add_all.assert_not_called()
    session.commit.assert_not_called()


def test_write_protection_checks_before_loading_records() -> None:
    records = create_autospec(SalaryRecordRepository, instance=True)
    records.exists_archived_in_period.return_value = True
    service, session = _service(records)

    with pytest.raises(StateError):
        service.calculate_and_distribute("2024-05")

    records.exists_archived_in_period.assert_called_once_with("2024-05")
    records.find_unarchived_by_period.assert_not_called()
    session.commit.assert_not_called()


def test_archive_with_nothing_to_archive_writes_no_audit_entry() -> None:
    records = create_autospec(SalaryRecordRepository, instance=True)
    records.exists_archived_in_period.return_value = False
    records.find_unarchived_by_period.return_value = []
    audit_log = create_autospec(AuditLogRepository, instance=True)
    service, session = _service(records, audit_log=audit_log)

    assert service.archive_salary_records(3, "2024-05") == 0

    audit_log.record.assert_not_called()
    session.commit.assert_not_called()


def test_latest_active_period_is_greatest_string() -> None:
    records = create_autospec(SalaryRecordRepository, instance=True)
    records.distinct_active_periods.return_value = ["2023-12", "2024-02", "2024-01"]
    service, _ = _service(records)

    assert service.get_latest_active_period() == "2024-02"


def test_report_labels_members_missing_from_directory() -> None:
    record = SalaryRecord(user_id=42, period="2024-05", mini_coins=700, salary_amount=Decimal(700), archived=False)
    for name in (
        "community_activity_points",
        "checkin_count",
        "checkin_points",
        "violation_handling_count",
        "violation_handling_points",
        "task_completion_points",
        "announcement_count",
        "announcement_points",
        "event_hosting_points",
        "birthday_bonus_points",
        "monthly_excellent_points",
        "base_points",
        "bonus_points",
        "total_points",
    ):
        setattr(record, name, 0)
    records = create_autospec(SalaryRecordRepository, instance=True)
    records.find_by_period.return_value = [record]
    members = create_autospec(MemberRepository, instance=True)
    members.find_by_ids.return_value = {}
    config_service = create_autospec(SalaryConfigService, instance=True)
    config_service.get_salary_pool_total.return_value = 500
    service = SalaryReportService(
        create_autospec(Session, instance=True),
        records=records,
        config_service=config_service,
        members=members,
    )

    report = service.generate_salary_report("2024-05")

    assert report.details[0].username == "unknown"
    assert report.allocated_total == 700
    assert report.remaining_amount == -200
    records.find_by_period.assert_called_once_with("2024-05")
