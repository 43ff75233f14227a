"""Process-wide logging: rich console output, optional dated files, bound context.

Records are pushed through a queue so request threads never block on console
or disk I/O. ``log_context`` values (period, operator, ...) are prefixed to
every message emitted while they are bound.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import SimpleQueue
from threading import RLock

from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .handlers import console_handler, file_handler
from .timing import timeit

__all__ = [
    "get_logger",
    "init_logging",
    "log_context",
    "shutdown_logging",
    "timeit",
]

DEFAULT_APP_NAME = "compensation"


@dataclass(frozen=True)
class LoggingConfig:
    app_name: str = DEFAULT_APP_NAME
    level: int = logging.INFO
    log_dir: Path | None = None
    console: bool = True
    rich_tracebacks: bool = True


_lock = RLock()
_active: LoggingConfig | None = None
_listener: QueueListener | None = None
_context_filter = ContextFilter()


def _as_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def init_logging(
    *,
    app_name: str = DEFAULT_APP_NAME,
    level: str | int = "INFO",
    log_dir: Path | str | None = None,
    console: bool = True,
    rich_tracebacks: bool = True,
) -> None:
    """Install the shared handlers on the root logger.

    Calling again with the same arguments is a no-op; different arguments
    replace the previous setup.
    """

    cfg = LoggingConfig(
        app_name=app_name,
        level=_as_level(level),
        log_dir=Path(log_dir) if log_dir else None,
        console=console,
        rich_tracebacks=rich_tracebacks,
    )
    with _lock:
        global _active, _listener
        if _active == cfg:
            return
        _teardown_locked()

        handlers: list[logging.Handler] = []
        if cfg.console:
            if cfg.rich_tracebacks:
                install_rich_traceback(show_locals=False)
            handlers.append(console_handler(cfg.level, rich_tracebacks=cfg.rich_tracebacks))
        if cfg.log_dir is not None:
            handlers.append(file_handler(cfg.log_dir, cfg.app_name, cfg.level))

        root = logging.getLogger()
        root.setLevel(logging.NOTSET)
        if handlers:
            queue: SimpleQueue = SimpleQueue()
            entry = QueueHandler(queue)
            entry.setLevel(cfg.level)
            # Context lives in a contextvar, so it must be captured on the producing thread.
            entry.addFilter(_context_filter)
            root.addHandler(entry)
            _listener = QueueListener(queue, *handlers, respect_handler_level=True)
            _listener.start()
        _active = cfg


def _teardown_locked() -> None:
    global _active, _listener
    if _listener is not None:
        _listener.stop()
    _listener = None
    _active = None
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


def shutdown_logging() -> None:
    """Flush and detach the queue listener."""

    with _lock:
        _teardown_locked()


def get_logger(name: str | None = None) -> logging.Logger:
    with _lock:
        if _active is None:
            init_logging()
        app_name = _active.app_name if _active else DEFAULT_APP_NAME
    return logging.getLogger(name or app_name)
