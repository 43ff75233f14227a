"""Per-period mutual exclusion for mutating operations."""
from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Iterator


class PeriodLocks:
    """Hand out one lock per period so writes to a period are serialised.

    Different periods never contend with each other. This only guards a single
    process; the ``(user_id, period)`` unique key protects across processes.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[str, Lock] = {}

    def lock_for(self, period: str) -> Lock:
        with self._guard:
            lock = self._locks.get(period)
            if lock is None:
                lock = self._locks[period] = Lock()
            return lock

    @contextmanager
    def hold(self, period: str) -> Iterator[None]:
        with self.lock_for(period):
            yield


period_locks = PeriodLocks()
