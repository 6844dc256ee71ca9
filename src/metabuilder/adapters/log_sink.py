"""Operational log: daily file plus console echo."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from metabuilder.domain import LogEntry, LogLevel, utc_timestamp

from .appender import append_line
from .console import Console

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LogSink:
    """Append-only operational log rotated daily by file name."""

    def __init__(
        self,
        log_dir: Path,
        console: Console,
        *,
        verbose: bool = False,
        clock: Clock = _utc_now,
    ) -> None:
        self._log_dir = log_dir
        self._console = console
        self._verbose = verbose
        self._clock = clock

    def path_for(self, moment: datetime) -> Path:
        return self._log_dir / f"meta_builder_{moment.astimezone(timezone.utc):%Y%m%d}.log"

    @property
    def path(self) -> Path:
        return self.path_for(self._clock())

    def emit(self, level: LogLevel, message: str) -> LogEntry:
        moment = self._clock()
        entry = LogEntry(timestamp=utc_timestamp(moment), level=level, message=message)
        line = entry.render()
        append_line(self.path_for(moment), line)
        if level is not LogLevel.DEBUG or self._verbose:
            self._console.log(level, line)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.emit(LogLevel.INFO, message)

    def warn(self, message: str) -> LogEntry:
        return self.emit(LogLevel.WARN, message)

    def error(self, message: str) -> LogEntry:
        return self.emit(LogLevel.ERROR, message)

    def debug(self, message: str) -> LogEntry:
        return self.emit(LogLevel.DEBUG, message)


__all__ = ["LogSink"]
