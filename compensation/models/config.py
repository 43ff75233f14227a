"""Key/value store backing the business configuration."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class SalaryConfig(Base):
    __tablename__ = "salary_config"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    config_key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    config_value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime)
