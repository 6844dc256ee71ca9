"""Port for launching external tools (bazel, make, rclone, ...)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence


class ToolRunner(ABC):
    """Opaque external actions: only the command and its exit status are visible."""

    @abstractmethod
    def run(self, argv: Sequence[str], *, cwd: Path | None = None, capture: bool = False) -> str:
        """Run ``argv``; raise ``RuntimeCapabilityFailure`` on a non-zero exit.

        Returns captured stdout when ``capture`` is set, otherwise an empty string.
        """

    @abstractmethod
    def available(self, executable: str) -> bool:
        """Return True when ``executable`` can be found on PATH."""


__all__ = ["ToolRunner"]
