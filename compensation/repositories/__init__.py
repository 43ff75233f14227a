"""Repositories encapsulating SQL for the compensation services."""

from .audit_repository import AuditLogRepository
from .config_repository import SalaryConfigRepository
from .member_repository import MemberRepository
from .salary_repository import PeriodCountRow, SalaryRecordRepository

__all__ = [
    "AuditLogRepository",
    "MemberRepository",
    "PeriodCountRow",
    "SalaryConfigRepository",
    "SalaryRecordRepository",
]
