"""Service layer for the compensation engine."""

from .salary_config import SalaryConfigService
from .salary_report import SalaryReportService
from .salary_service import SalaryService

__all__ = [
    "SalaryConfigService",
    "SalaryReportService",
    "SalaryService",
]
