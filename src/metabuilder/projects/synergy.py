"""Project Synergy (IBM): trust and compliance in hybrid cloud for regulated industries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

from metabuilder.domain import AITaskKind, AuditReportKind, FailureTrigger, ProjectDefinition
from metabuilder.ports.capability_provider import AITaskHandler, AuditHandler

from .base import ProjectPlugin

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext


class SynergyProject(ProjectPlugin):
    definition = ProjectDefinition(
        key="synergy",
        name="Project Synergy (IBM)",
        supported_languages=("java", "go", "python"),
        build_tools=("jenkins", "bazel", "ibmcloud-cli"),
        primary_tool="bazel",
    )

    def bootstrap(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Synergy] Bootstrapping environment...")
        ctx.install_packages(["bazel", "golang", "python3", "openjdk-17"])
        ctx.log.info("[Synergy] Installing IBM Cloud CLI...")
        return "Synergy hybrid cloud env bootstrapped."

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str:
        target = target or "//..."
        ctx.log.info(f"[Synergy] Compiling all targets with Bazel: {target}")
        ctx.tools.run(["bazel", "build", target])
        return "Synergy Bazel build successful."

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {
            AuditReportKind.SUPPLY_CHAIN: self.report_supply_chain,
            AuditReportKind.REGULATORY: self.report_regulatory,
        }

    def report_supply_chain(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Synergy] Generating blockchain-based supply-chain logs...")
        return "Logged build to Hyperledger."

    def report_regulatory(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Synergy] Running forensic/regulatory mapping...")
        return "Ran regulatory mapping report."

    def ai_handlers(self) -> Mapping[AITaskKind, AITaskHandler]:
        return {AITaskKind.PREDICT_RISK: self.task_predict_risk}

    def task_predict_risk(self, ctx: "RuntimeContext", args: Sequence[str]) -> str:
        ctx.log.info("[Synergy] Running AI risk-prediction scripts...")
        return "Ran compliance risk prediction."

    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str:
        ctx.log.warn(f"[Synergy] Self-healing triggered by error {trigger.exit_code}.")
        ctx.log.info("[Synergy] Triggering multi-cloud deployment self-healing...")
        return "Multi-cloud self-heal triggered."


__all__ = ["SynergyProject"]
