"""Project plugin contract."""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from metabuilder.domain import AITaskKind, AuditReportKind, CapabilityKind, ProjectDefinition
from metabuilder.ports.capability_provider import AITaskHandler, AuditHandler


class ProjectPlugin:
    """A named unit supplying metadata and zero or more capability overrides.

    Subclasses override a capability by defining a method named after it
    (``bootstrap``, ``compile``, ``sync``, ``generate``, ``self_heal``) with the
    matching ``CapabilityProvider`` signature. Audit and AI assistance are
    usually supplied per report or task through :meth:`audit_handlers` and
    :meth:`ai_handlers`; names missing there fall through to the default
    tables.
    """

    definition: ProjectDefinition

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {}

    def ai_handlers(self) -> Mapping[AITaskKind, AITaskHandler]:
        return {}

    def method_for(self, kind: CapabilityKind) -> Callable[..., Optional[str]] | None:
        method = getattr(self, kind.value, None)
        return method if callable(method) else None

    def overrides(self) -> tuple[CapabilityKind, ...]:
        provided = []
        for kind in CapabilityKind:
            if self.method_for(kind) is not None:
                provided.append(kind)
            elif kind is CapabilityKind.AUDIT and self.audit_handlers():
                provided.append(kind)
            elif kind is CapabilityKind.AI_ASSIST and self.ai_handlers():
                provided.append(kind)
        return tuple(provided)


__all__ = ["ProjectPlugin"]
