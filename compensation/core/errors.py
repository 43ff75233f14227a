"""Business-rule exceptions raised by the compensation services.

Each exception carries the HTTP status the API layer should answer with, a
stable machine-readable ``code`` and an optional ``detail`` payload. They are
local, synchronous failures and are surfaced to callers verbatim.
"""
from __future__ import annotations

from typing import Any, Iterable


class CompensationError(Exception):
    """Base class for failures the API layer translates into responses."""

    status_code: int = 400
    code: str = "BUSINESS_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.detail = detail


class ValidationError(CompensationError):
    """One or more input values violate a configured rule."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, violations: Iterable[str] | str, **kwargs: Any) -> None:
        if isinstance(violations, str):
            violations = [violations]
        self.violations: list[str] = list(violations)
        kwargs.setdefault("detail", self.violations)
        super().__init__("；".join(self.violations), **kwargs)


class ConflictError(CompensationError):
    status_code = 409
    code = "CONFLICT"


class NotFoundError(CompensationError):
    status_code = 404
    code = "NOT_FOUND"


class StateError(CompensationError):
    """A write was attempted against a period that no longer accepts writes."""

    status_code = 400
    code = "INVALID_STATE"


__all__ = [
    "CompensationError",
    "ConflictError",
    "NotFoundError",
    "StateError",
    "ValidationError",
]
