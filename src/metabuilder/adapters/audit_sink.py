"""Append-only audit trail."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

from metabuilder.domain import AuditAction, AuditEntry, utc_timestamp

from .appender import append_line


class AuditSink:
    """Writes one immutable line per action; never truncates or rewrites."""

    def __init__(self, path: Path, actor: str, project: Callable[[], str]) -> None:
        self._path = path
        self._actor = actor
        self._project = project

    @property
    def path(self) -> Path:
        return self._path

    @property
    def actor(self) -> str:
        return self._actor

    def record(self, action: AuditAction, details: str) -> AuditEntry:
        entry = AuditEntry(
            timestamp=utc_timestamp(),
            actor=self._actor,
            project=self._project(),
            action=action,
            details=details,
        )
        append_line(self._path, entry.render())
        return entry

    def entries(self) -> Iterator[AuditEntry]:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as fh:
            for line in fh:
                if not line.strip():
                    continue
                yield AuditEntry.parse(line)

    def size(self) -> int:
        return self._path.stat().st_size if self._path.exists() else 0


__all__ = ["AuditSink"]
