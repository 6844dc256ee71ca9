"""Eagerly resolved capability bindings for one loaded project."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Dict, Mapping, Optional, Sequence

from metabuilder.domain import AITaskKind, ArtifactKind, AuditReportKind, CapabilityKind, FailureTrigger
from metabuilder.domain.errors import UnsupportedAITask, UnsupportedAuditReport
from metabuilder.ports.capability_provider import AITaskHandler, AuditHandler, CapabilityProvider

from .defaults import DefaultCapabilityProvider

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.projects.base import ProjectPlugin

    from .context import RuntimeContext


class BindingOrigin(str, Enum):
    OVERRIDE = "override"
    DEFAULT = "default"


@dataclass(frozen=True)
class CapabilityBinding:
    kind: CapabilityKind
    origin: BindingOrigin
    handler: Callable[..., Optional[str]]

    @property
    def is_override(self) -> bool:
        return self.origin is BindingOrigin.OVERRIDE


class TieredAuditHandler:
    """Project report table first, then the default table."""

    def __init__(self, project: Mapping[AuditReportKind, AuditHandler], default: Mapping[AuditReportKind, AuditHandler]) -> None:
        self._project = dict(project)
        self._default = dict(default)

    def supported(self) -> tuple[AuditReportKind, ...]:
        return tuple(kind for kind in AuditReportKind if kind in self._project or kind in self._default)

    def __call__(self, ctx: "RuntimeContext", report: AuditReportKind) -> Optional[str]:
        handler = self._project.get(report) or self._default.get(report)
        if handler is None:
            raise UnsupportedAuditReport(report.value)
        ctx.log.info(f"Generating audit report: {report.value}")
        return handler(ctx)


class TieredAITaskHandler:
    """Project task table first, then the default table."""

    def __init__(self, project: Mapping[AITaskKind, AITaskHandler], default: Mapping[AITaskKind, AITaskHandler]) -> None:
        self._project = dict(project)
        self._default = dict(default)

    def supported(self) -> tuple[AITaskKind, ...]:
        return tuple(kind for kind in AITaskKind if kind in self._project or kind in self._default)

    def __call__(self, ctx: "RuntimeContext", task: AITaskKind, args: Sequence[str]) -> Optional[str]:
        handler = self._project.get(task) or self._default.get(task)
        if handler is None:
            raise UnsupportedAITask(task.value)
        ctx.log.info(f"AI Assist Task: {task.value}")
        return handler(ctx, args)


class CapabilitySet(CapabilityProvider):
    """Immutable mapping of every capability kind to its implementation."""

    def __init__(self, bindings: Mapping[CapabilityKind, CapabilityBinding]) -> None:
        missing = [kind.value for kind in CapabilityKind if kind not in bindings]
        if missing:
            raise ValueError(f"Capability set is missing bindings for: {', '.join(missing)}")
        self._bindings = MappingProxyType(dict(bindings))

    @property
    def bindings(self) -> Mapping[CapabilityKind, CapabilityBinding]:
        return self._bindings

    def binding(self, kind: CapabilityKind) -> CapabilityBinding:
        return self._bindings[kind]

    def origin(self, kind: CapabilityKind) -> BindingOrigin:
        return self._bindings[kind].origin

    def overrides(self) -> tuple[CapabilityKind, ...]:
        return tuple(kind for kind, binding in self._bindings.items() if binding.is_override)

    def bootstrap(self, ctx: "RuntimeContext") -> str | None:
        return self._bindings[CapabilityKind.BOOTSTRAP].handler(ctx)

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str | None:
        return self._bindings[CapabilityKind.COMPILE].handler(ctx, target)

    def audit(self, ctx: "RuntimeContext", report: AuditReportKind) -> str | None:
        return self._bindings[CapabilityKind.AUDIT].handler(ctx, report)

    def ai_assist(self, ctx: "RuntimeContext", task: AITaskKind, args: Sequence[str]) -> str | None:
        return self._bindings[CapabilityKind.AI_ASSIST].handler(ctx, task, args)

    def sync(self, ctx: "RuntimeContext") -> str | None:
        return self._bindings[CapabilityKind.SYNC].handler(ctx)

    def generate(self, ctx: "RuntimeContext", kind: ArtifactKind, name: str, path: Path) -> str | None:
        return self._bindings[CapabilityKind.GENERATE].handler(ctx, kind, name, path)

    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str | None:
        return self._bindings[CapabilityKind.SELF_HEAL].handler(ctx, trigger)


def build_capability_set(plugin: "ProjectPlugin", defaults: DefaultCapabilityProvider) -> CapabilitySet:
    bindings: Dict[CapabilityKind, CapabilityBinding] = {}
    for kind in CapabilityKind:
        method = plugin.method_for(kind)
        if method is not None:
            bindings[kind] = CapabilityBinding(kind, BindingOrigin.OVERRIDE, method)
            continue
        if kind is CapabilityKind.AUDIT and plugin.audit_handlers():
            handler: Callable[..., Optional[str]] = TieredAuditHandler(
                plugin.audit_handlers(), defaults.audit_handlers()
            )
            bindings[kind] = CapabilityBinding(kind, BindingOrigin.OVERRIDE, handler)
            continue
        if kind is CapabilityKind.AI_ASSIST and plugin.ai_handlers():
            handler = TieredAITaskHandler(plugin.ai_handlers(), defaults.ai_handlers())
            bindings[kind] = CapabilityBinding(kind, BindingOrigin.OVERRIDE, handler)
            continue
        bindings[kind] = CapabilityBinding(kind, BindingOrigin.DEFAULT, getattr(defaults, kind.value))
    return CapabilitySet(bindings)


__all__ = [
    "BindingOrigin",
    "CapabilityBinding",
    "CapabilitySet",
    "TieredAITaskHandler",
    "TieredAuditHandler",
    "build_capability_set",
]
