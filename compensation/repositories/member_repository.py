"""Member directory backed by the ``member`` table."""
from __future__ import annotations

from typing import Iterable

from sqlalchemy import select

from compensation.models import SALARY_ROLES, Member

from .base import BaseRepository


class MemberRepository(BaseRepository):
    """Answers "who is paid this period" for the period manager."""

    def find_formal_members(self) -> list[Member]:
        statement = select(Member).where(Member.role.in_(SALARY_ROLES)).order_by(Member.id)
        return list(self._session.scalars(statement))

    def find_by_ids(self, ids: Iterable[int]) -> dict[int, Member]:
        ids = set(ids)
        if not ids:
            return {}
        statement = select(Member).where(Member.id.in_(ids))
        return {member.id: member for member in self._session.scalars(statement)}
