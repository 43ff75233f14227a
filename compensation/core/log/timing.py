"""Duration logging for batch operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Iterator, Optional


class _Timer:
    def __init__(self, total: Optional[int]) -> None:
        self.total = total
        self.started = perf_counter()

    @property
    def elapsed(self) -> float:
        return perf_counter() - self.started

    def describe(self, unit: str) -> str:
        text = f"{self.elapsed * 1000:.1f}ms"
        if self.total:
            text += f", {self.total:,} {unit}"
        return text


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "records",
    total: Optional[int] = None,
) -> Iterator[_Timer]:
    """Log how long the block took; a raising block is logged as a warning and re-raised."""

    log = logger or logging.getLogger("compensation.timing")
    timer = _Timer(total)
    try:
        yield timer
    except Exception:
        log.warning("%s failed after %s", label, timer.describe(unit))
        raise
    log.log(level, "%s finished in %s", label, timer.describe(unit))
