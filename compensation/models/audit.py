"""Append-only audit trail of privileged operations."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class AuditLog(Base):
    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    operator_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    operation_type: Mapped[str] = mapped_column(String(64), nullable=False)
    operation_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    operation_detail: Mapped[str | None] = mapped_column(Text)
