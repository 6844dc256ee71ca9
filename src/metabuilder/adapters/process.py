"""Subprocess-backed tool runner."""

from __future__ import annotations

import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from metabuilder.domain.errors import RuntimeCapabilityFailure
from metabuilder.ports.tool_runner import ToolRunner

MISSING_EXECUTABLE = 127


class SubprocessToolRunner(ToolRunner):
    def __init__(self, cwd: Path | None = None) -> None:
        self._cwd = cwd

    def run(self, argv: Sequence[str], *, cwd: Path | None = None, capture: bool = False) -> str:
        args = [str(arg) for arg in argv]
        command = shlex.join(args)
        try:
            result = subprocess.run(
                args,
                cwd=cwd or self._cwd,
                stdout=subprocess.PIPE if capture else None,
                text=True,
            )
        except FileNotFoundError as exc:
            missing = args[0] if args else "<unknown>"
            raise RuntimeCapabilityFailure(
                MISSING_EXECUTABLE,
                command,
                f"Executable not found: {missing}",
            ) from exc
        if result.returncode != 0:
            raise RuntimeCapabilityFailure(result.returncode, command)
        return (result.stdout or "") if capture else ""

    def available(self, executable: str) -> bool:
        return shutil.which(executable) is not None


__all__ = ["MISSING_EXECUTABLE", "SubprocessToolRunner"]
