"""Terminal output with optional ANSI decoration."""

from __future__ import annotations

import sys
from typing import TextIO

from metabuilder.domain import LogLevel

RESET = "\033[0m"
BOLD = "\033[1m"
_LEVEL_COLORS = {
    LogLevel.INFO: "\033[0;32m",
    LogLevel.WARN: "\033[0;33m",
    LogLevel.ERROR: "\033[0;31m",
    LogLevel.DEBUG: "\033[0;36m",
}
CYAN = _LEVEL_COLORS[LogLevel.DEBUG]


class Console:
    def __init__(self, *, color: bool = True, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self._color = color and self._is_tty(stdout or sys.stdout)

    @staticmethod
    def _is_tty(stream: TextIO) -> bool:
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    @property
    def color(self) -> bool:
        return self._color

    @property
    def out(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._stderr or sys.stderr

    def paint(self, text: str, *codes: str) -> str:
        if not self._color or not codes:
            return text
        return "".join(codes) + text + RESET

    def log(self, level: LogLevel, line: str) -> None:
        if level is LogLevel.ERROR:
            print(self.paint(line, _LEVEL_COLORS[level], BOLD), file=self.err)
        else:
            print(self.paint(line, _LEVEL_COLORS[level]), file=self.out)

    def echo(self, text: str = "") -> None:
        print(text, file=self.out)

    def fail(self, text: str) -> None:
        print(text, file=self.err)


__all__ = ["BOLD", "CYAN", "Console", "RESET"]
