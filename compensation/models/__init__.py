"""Database models for the compensation domain."""
from __future__ import annotations

from .audit import AuditLog
from .base import Base
from .config import SalaryConfig
from .members import SALARY_ROLES, Member, Role
from .salary import DERIVED_FIELDS, DIMENSION_FIELDS, SalaryRecord

__all__ = [
    "AuditLog",
    "Base",
    "DERIVED_FIELDS",
    "DIMENSION_FIELDS",
    "Member",
    "Role",
    "SALARY_ROLES",
    "SalaryConfig",
    "SalaryRecord",
]
