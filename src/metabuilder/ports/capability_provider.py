"""Port definition for capability implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from metabuilder.domain import AITaskKind, ArtifactKind, AuditReportKind, FailureTrigger

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext

AuditHandler = Callable[["RuntimeContext"], Optional[str]]
AITaskHandler = Callable[["RuntimeContext", Sequence[str]], Optional[str]]


class CapabilityProvider(ABC):
    """One method per capability kind.

    Each method returns the details recorded in the capability's audit entry,
    or ``None`` to let the dispatcher record a generic one.
    """

    @abstractmethod
    def bootstrap(self, ctx: "RuntimeContext") -> str | None:
        """Prepare the development environment."""

    @abstractmethod
    def compile(self, ctx: "RuntimeContext", target: str | None) -> str | None:
        """Build ``target`` (or everything)."""

    @abstractmethod
    def audit(self, ctx: "RuntimeContext", report: AuditReportKind) -> str | None:
        """Produce a compliance report."""

    @abstractmethod
    def ai_assist(self, ctx: "RuntimeContext", task: AITaskKind, args: Sequence[str]) -> str | None:
        """Run an AI-assisted task."""

    @abstractmethod
    def sync(self, ctx: "RuntimeContext") -> str | None:
        """Ship the audit log to the remote store."""

    @abstractmethod
    def generate(self, ctx: "RuntimeContext", kind: ArtifactKind, name: str, path: Path) -> str | None:
        """Emit a templated artifact."""

    @abstractmethod
    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str | None:
        """Best-effort recovery after a failure; returns details only when an action ran."""


__all__ = ["AITaskHandler", "AuditHandler", "CapabilityProvider"]
