"""Project Chimera (Google): automated license compliance for polyglot microservices."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

from metabuilder.domain import AITaskKind, AuditReportKind, FailureTrigger, ProjectDefinition
from metabuilder.domain.errors import RuntimeCapabilityFailure
from metabuilder.ports.capability_provider import AITaskHandler, AuditHandler

from .base import ProjectPlugin

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext


class ChimeraProject(ProjectPlugin):
    """Bazel-driven polyglot builds; bootstrap uses the shared default."""

    definition = ProjectDefinition(
        key="chimera",
        name="Project Chimera (Google)",
        supported_languages=("go", "python", "java", "cpp", "rust"),
        build_tools=("bazel", "jenkins"),
        primary_tool="bazel",
    )

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str:
        target = target or "//..."
        ctx.log.info(f"[Chimera] Compiling all targets with Bazel: {target}")
        if not ctx.tools.available("bazel"):
            ctx.log.error("Bazel not found. Run --bootstrap first.")
            raise RuntimeCapabilityFailure(1, f"bazel build {target}", "Bazel not found. Run --bootstrap first.")
        ctx.tools.run(["bazel", "build", target])
        ctx.log.info("[Chimera] Bazel build complete.")
        return f"Bazel build successful for target {target}."

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {
            AuditReportKind.SPDX: self.report_license,
            AuditReportKind.LICENSE: self.report_license,
            AuditReportKind.SHADOW_IT: self.report_shadow_it,
        }

    def report_license(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Chimera] Running Bazel for automated license scanning...")
        ctx.log.info("Generating SPDX and dependency visualization...")
        return "Generated Chimera SPDX report."

    def report_shadow_it(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Chimera] Running rclone shadow-IT detection...")
        return "Ran rclone shadow-IT detection."

    def ai_handlers(self) -> Mapping[AITaskKind, AITaskHandler]:
        return {AITaskKind.REMEDIATE: self.task_remediate}

    def task_remediate(self, ctx: "RuntimeContext", args: Sequence[str]) -> str:
        ctx.log.info("[Chimera] Running AI-driven license remediation scripting...")
        return "Ran license remediation."

    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str:
        ctx.log.warn(f"[Chimera] Self-healing triggered by error {trigger.exit_code}.")
        return "Chimera Jenkins pipeline heal triggered."


__all__ = ["ChimeraProject"]
