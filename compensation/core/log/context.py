"""Request-scoped key/value pairs prefixed to log messages."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator, Mapping

_bound: contextvars.ContextVar[Mapping[str, object]] = contextvars.ContextVar("log_context", default={})


class LogContext:
    """Bind values such as ``period`` or ``operator`` for a block of work."""

    @contextmanager
    def scoped(self, **values: object) -> Iterator[None]:
        merged = {**_bound.get(), **{k: v for k, v in values.items() if v is not None}}
        token = _bound.set(merged)
        try:
            yield
        finally:
            _bound.reset(token)

    def current(self) -> dict[str, object]:
        return dict(_bound.get())


class ContextFilter(logging.Filter):
    """Render the bound values into ``record.context`` as ``[k=v ...] ``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "context", None) is not None:
            return True
        values = _bound.get()
        record.context = "[" + " ".join(f"{k}={v}" for k, v in values.items()) + "] " if values else ""
        return True


log_context = LogContext()
