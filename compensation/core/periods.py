"""Helpers for ``YYYY-MM`` period identifiers."""
from __future__ import annotations

import re
from datetime import date, datetime

PERIOD_PATTERN = re.compile(r"^[0-9]{4}-(0[1-9]|1[0-2])$")

# Placeholder stamped on records created before periods existed.
LEGACY_PERIOD = "1970-01"


def current_period(today: date | None = None) -> str:
    """Return the period identifier for ``today`` (defaults to the local date)."""

    today = today or date.today()
    return f"{today.year:04d}-{today.month:02d}"


def is_valid_period(period: object) -> bool:
    return isinstance(period, str) and PERIOD_PATTERN.fullmatch(period) is not None


def period_of(moment: datetime | date) -> str:
    return f"{moment.year:04d}-{moment.month:02d}"
