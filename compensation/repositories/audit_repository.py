"""Audit log writer."""
from __future__ import annotations

from datetime import datetime

from compensation.models import AuditLog

from .base import BaseRepository


class AuditLogRepository(BaseRepository):
    def record(
        self,
        operator_id: int,
        action: str,
        detail: str,
        *,
        at: datetime | None = None,
    ) -> AuditLog:
        """Append one entry; it commits with the caller's unit of work."""

        entry = AuditLog(
            operator_id=operator_id,
            operation_type=action,
            operation_time=at or datetime.now(),
            operation_detail=detail,
        )
        self._session.add(entry)
        return entry
