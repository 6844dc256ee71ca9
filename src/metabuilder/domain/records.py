"""Value objects written to the log, audit and forensic stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Tuple, Union

from .capability import AuditAction

AUDIT_SEPARATOR = " | "


def utc_timestamp(moment: datetime | None = None) -> str:
    value = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


class LogLevel(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    DEBUG = "DEBUG"


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: LogLevel
    message: str

    def render(self) -> str:
        return f"{self.timestamp} [{self.level.value}] {self.message}"


def _single_line(value: str) -> str:
    return " ".join(str(value).splitlines()).strip()


@dataclass(frozen=True)
class AuditEntry:
    """Immutable compliance record of one action taken by the framework."""

    timestamp: str
    actor: str
    project: str
    action: AuditAction
    details: str

    def render(self) -> str:
        fields = [self.timestamp, self.actor, self.project, self.action.value, self.details]
        return AUDIT_SEPARATOR.join(_single_line(item) for item in fields)

    @classmethod
    def parse(cls, line: str) -> "AuditEntry":
        parts = line.rstrip("\n").split(AUDIT_SEPARATOR, 4)
        if len(parts) != 5:
            raise ValueError(f"Malformed audit line: {line!r}")
        timestamp, actor, project, action, details = parts
        return cls(timestamp, actor, project, AuditAction(action), details)


@dataclass(frozen=True)
class StackFrame:
    function: str
    file: str
    line: int

    def render(self) -> str:
        return f"{self.line} {self.function} {self.file}"


ExitCode = Union[int, str]


@dataclass(frozen=True)
class FailureTrigger:
    """The (exit code, source location, failing command) triple."""

    exit_code: ExitCode
    line: int
    command: str
    file: str = ""

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}" if self.file else str(self.line)

    @property
    def is_manual(self) -> bool:
        return self.exit_code == "MANUAL"


@dataclass(frozen=True)
class ForensicSnapshot:
    start_time: str
    actor: str
    project: str
    exit_code: ExitCode
    source_line: int
    source_file: str
    failing_command: str
    call_stack: Tuple[StackFrame, ...] = field(default_factory=tuple)

    def render(self) -> List[str]:
        lines = [
            f"--- FORENSIC LOG: {self.start_time} ---",
            f"User: {self.actor}",
            f"Project: {self.project}",
            f"Error Code: {self.exit_code}",
            f"Line: {self.source_line}",
            f"File: {self.source_file}",
            f"Command: {self.failing_command}",
            "--- STACK TRACE ---",
        ]
        lines.extend(frame.render() for frame in self.call_stack)
        return lines


__all__ = [
    "AuditEntry",
    "ExitCode",
    "FailureTrigger",
    "ForensicSnapshot",
    "LogEntry",
    "LogLevel",
    "StackFrame",
    "utc_timestamp",
]
