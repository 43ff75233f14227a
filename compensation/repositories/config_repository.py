"""Data access for the key/value configuration table."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from compensation.models import SalaryConfig

from .base import BaseRepository


class SalaryConfigRepository(BaseRepository):
    def find_all(self) -> list[SalaryConfig]:
        return list(self._session.scalars(select(SalaryConfig).order_by(SalaryConfig.config_key)))

    def find_by_key(self, key: str) -> SalaryConfig | None:
        statement = select(SalaryConfig).where(SalaryConfig.config_key == key)
        return self._session.scalars(statement).first()

    def upsert(self, key: str, value: str, *, now: datetime | None = None) -> SalaryConfig:
        entry = self.find_by_key(key)
        if entry is None:
            entry = SalaryConfig(config_key=key, config_value=value)
            self._session.add(entry)
        entry.config_value = value
        entry.updated_at = now or datetime.now()
        return entry
