"""Handler factories for console and file output."""
from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

CONSOLE_FORMAT = "%(context)s%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class DatedFileHandler(logging.FileHandler):
    """Append to ``<prefix>-YYYY-MM-DD.log``, opening a new file when the day changes."""

    def __init__(self, directory: Path, prefix: str, *, encoding: str = "utf-8") -> None:
        self.directory = Path(directory)
        self.prefix = prefix
        self.directory.mkdir(parents=True, exist_ok=True)
        self._day: date = datetime.now().date()
        super().__init__(self._path_for(self._day), mode="a", encoding=encoding)

    def _path_for(self, day: date) -> Path:
        return self.directory / f"{self.prefix}-{day.isoformat()}.log"

    def emit(self, record: logging.LogRecord) -> None:
        day = datetime.fromtimestamp(record.created).date()
        if day != self._day:
            self._day = day
            if self.stream:
                self.stream.flush()
                self.stream.close()
            self.baseFilename = os.fspath(self._path_for(day))
            self.stream = self._open()
        super().emit(record)


def console_handler(level: int, *, rich_tracebacks: bool) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=rich_tracebacks,
        show_path=False,
        markup=False,
        log_time_format=TIME_FORMAT,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def file_handler(directory: Path, prefix: str, level: int) -> logging.Handler:
    handler = DatedFileHandler(directory, prefix)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=TIME_FORMAT))
    return handler
