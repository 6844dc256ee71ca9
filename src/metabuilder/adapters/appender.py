"""Single-write line appends shared by the log and audit stores."""

from __future__ import annotations

import os
from pathlib import Path


def append_line(path: Path, line: str) -> None:
    """Append ``line`` plus a newline with one ``write`` on an O_APPEND descriptor.

    POSIX appends of a single write never interleave with other appenders,
    so concurrent processes cannot tear each other's lines.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = (line.rstrip("\n") + "\n").encode("utf-8")
    fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o640)
    try:
        written = os.write(fd, payload)
        while written < len(payload):
            written += os.write(fd, payload[written:])
    finally:
        os.close(fd)


__all__ = ["append_line"]
