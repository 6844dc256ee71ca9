"""Project Aegis (Microsoft): AI/ML governance across Azure and Office."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from metabuilder.domain import AuditReportKind, FailureTrigger, ProjectDefinition
from metabuilder.ports.capability_provider import AuditHandler

from .base import ProjectPlugin

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext


class AegisProject(ProjectPlugin):
    definition = ProjectDefinition(
        key="aegis",
        name="Project Aegis (Microsoft)",
        supported_languages=("csharp", "python", "powershell"),
        build_tools=("bazel", "bamboo", "azure-cli"),
        primary_tool="bazel",
    )

    def bootstrap(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Aegis] Bootstrapping environment...")
        ctx.install_packages(["bazel", "python3", "azure-cli"])
        ctx.log.info("[Aegis] Configuring Azure CLI...")
        return "Aegis environment bootstrapped with Azure-CLI."

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str:
        target = target or "//..."
        ctx.log.info(f"[Aegis] Compiling C# and Python ML envs with Bazel: {target}")
        ctx.tools.run(["bazel", "build", target])
        return "Aegis Bazel build successful."

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {AuditReportKind.MBOM: self.report_mbom, AuditReportKind.BIAS: self.report_bias}

    def report_mbom(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Aegis] Generating MBOM (ML Bill of Materials) manifests...")
        return "Generated Aegis MBOM report."

    def report_bias(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Aegis] Running AI bias and explainability tooling...")
        return "Ran AI bias/XAI report."

    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str:
        ctx.log.warn(f"[Aegis] Self-healing triggered by error {trigger.exit_code}.")
        ctx.log.info("[Aegis] Applying Azure self-healing configurations...")
        return "Azure self-heal config applied."


__all__ = ["AegisProject"]
