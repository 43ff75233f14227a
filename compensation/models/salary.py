"""ORM model for per-member, per-period salary records."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base

# Raw dimension inputs entered for a member.
DIMENSION_FIELDS: tuple[str, ...] = (
    "community_activity_points",
    "checkin_count",
    "violation_handling_count",
    "task_completion_points",
    "announcement_count",
    "event_hosting_points",
    "birthday_bonus_points",
    "monthly_excellent_points",
)

# Values derived from the dimensions by the calculator.
DERIVED_FIELDS: tuple[str, ...] = (
    "checkin_points",
    "violation_handling_points",
    "announcement_points",
    "base_points",
    "bonus_points",
    "total_points",
    "mini_coins",
)


class SalaryRecord(Base):
    """One member's compensation data for one period.

    ``version`` is SQLAlchemy's optimistic-lock column: an UPDATE issued from
    a stale row raises ``StaleDataError``.
    """

    __tablename__ = "salary_record"
    __table_args__ = (UniqueConstraint("user_id", "period", name="uq_salary_record_user_period"),)

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    period: Mapped[str] = mapped_column(String(7), nullable=False, index=True)

    community_activity_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    checkin_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    checkin_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    violation_handling_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    violation_handling_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    task_completion_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    announcement_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    announcement_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    event_hosting_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    birthday_bonus_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    monthly_excellent_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    base_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bonus_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mini_coins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    salary_amount: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0")
    )
    remark: Mapped[str | None] = mapped_column(String(255))

    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, onupdate=datetime.now)

    __mapper_args__ = {"version_id_col": version}

    def set_mini_coins(self, coins: int) -> None:
        """Assign the final allocation; ``salary_amount`` always mirrors it."""

        self.mini_coins = coins
        self.salary_amount = Decimal(coins)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return (
            f"SalaryRecord(id={self.id!r}, user_id={self.user_id!r}, period={self.period!r}, "
            f"mini_coins={self.mini_coins!r}, archived={self.archived!r})"
        )
