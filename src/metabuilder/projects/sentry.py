"""Project Sentry (Amazon): security and operational risk monitoring in AWS."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

from metabuilder.domain import AITaskKind, AuditReportKind, FailureTrigger, ProjectDefinition
from metabuilder.ports.capability_provider import AITaskHandler, AuditHandler

from .base import ProjectPlugin

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext


class SentryProject(ProjectPlugin):
    definition = ProjectDefinition(
        key="sentry",
        name="Project Sentry (Amazon)",
        supported_languages=("java", "rust", "python"),
        build_tools=("make", "jenkins", "aws-cli"),
        primary_tool="make",
    )

    def bootstrap(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Sentry] Bootstrapping environment...")
        ctx.install_packages(["make", "openjdk-17", "rustc", "cargo", "python3", "aws-cli"])
        ctx.log.info("[Sentry] Configuring AWS CLI...")
        return "Sentry environment bootstrapped with AWS-CLI."

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str:
        target = target or "all"
        ctx.log.info(f"[Sentry] Compiling all targets with GNU Make: {target}")
        ctx.tools.run(["make", target])
        return f"Make build successful for target {target}."

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {
            AuditReportKind.RISK_SCORE: self.report_risk_score,
            AuditReportKind.CHAIN_OF_CUSTODY: self.report_chain_of_custody,
        }

    def report_risk_score(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Sentry] Running risk scoring and patch orchestration scripts...")
        return "Ran Sentry risk scoring."

    def report_chain_of_custody(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Sentry] Generating AWS chain-of-custody report...")
        return "Generated AWS chain-of-custody report."

    def ai_handlers(self) -> Mapping[AITaskKind, AITaskHandler]:
        return {AITaskKind.BLAST_RADIUS: self.task_blast_radius}

    def task_blast_radius(self, ctx: "RuntimeContext", args: Sequence[str]) -> str:
        ctx.log.info("[Sentry] Running AI blast-radius analysis...")
        return "Ran blast-radius analysis."

    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str:
        ctx.log.warn(f"[Sentry] Self-healing triggered by error {trigger.exit_code}.")
        ctx.log.info("[Sentry] Triggering Lambda/EC2 self-repair...")
        return "EC2/Lambda self-repair invoked."


__all__ = ["SentryProject"]
