"""Per-incident forensic snapshot files."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from metabuilder.domain import ForensicSnapshot


class ForensicStore:
    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def write(self, snapshot: ForensicSnapshot) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S_%f")
        content = "\n".join(snapshot.render()) + "\n"
        suffix = 0
        while True:
            name = f"err_{stamp}.log" if suffix == 0 else f"err_{stamp}_{suffix}.log"
            target = self._directory / name
            try:
                # exclusive create: an incident file is never reused
                with target.open("x", encoding="utf-8") as fh:
                    fh.write(content)
                return target
            except FileExistsError:
                suffix += 1

    def incidents(self) -> list[Path]:
        if not self._directory.exists():
            return []
        return sorted(self._directory.glob("err_*.log"))


__all__ = ["ForensicStore"]
