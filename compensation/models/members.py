"""ORM model for the organisation member directory."""
from __future__ import annotations

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    LEADER = "LEADER"
    VICE_LEADER = "VICE_LEADER"
    MEMBER = "MEMBER"
    INTERN = "INTERN"
    APPLICANT = "APPLICANT"


# Roles that receive a salary record each period, in display order.
SALARY_ROLES: tuple[Role, ...] = (Role.LEADER, Role.VICE_LEADER, Role.INTERN)


class Member(Base):
    """A person known to the organisation, with their current role."""

    __tablename__ = "member"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="member_role", native_enum=False, length=16), nullable=False
    )
