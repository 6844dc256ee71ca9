"""Project Clarity (OpenAI): IP and ethical governance for LLMs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

from metabuilder.domain import AITaskKind, AuditReportKind, FailureTrigger, ProjectDefinition
from metabuilder.ports.capability_provider import AITaskHandler, AuditHandler

from .base import ProjectPlugin

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext


class ClarityProject(ProjectPlugin):
    definition = ProjectDefinition(
        key="clarity",
        name="Project Clarity (OpenAI)",
        supported_languages=("python",),
        build_tools=("bazel", "jenkins", "pip"),
        primary_tool="bazel",
    )

    def bootstrap(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Clarity] Bootstrapping environment...")
        ctx.install_packages(["bazel", "python3", "python3-pip", "python3-venv"])
        ctx.log.info("[Clarity] Setting up PyTorch/TensorFlow venv...")
        return "Clarity LLM environment bootstrapped."

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str:
        target = target or "//..."
        ctx.log.info(f"[Clarity] Compiling Python targets with Bazel: {target}")
        ctx.tools.run(["bazel", "build", target])
        return "Clarity Bazel build successful."

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {
            AuditReportKind.TRAINING_DATA: self.report_training_data,
            AuditReportKind.XAI: self.report_xai,
        }

    def report_training_data(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Clarity] Running training-data auditors...")
        return "Ran training-data audit."

    def report_xai(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Clarity] Generating XAI dashboards...")
        return "Generated XAI dashboard."

    def ai_handlers(self) -> Mapping[AITaskKind, AITaskHandler]:
        return {AITaskKind.IP_INFRINGEMENT: self.task_ip_infringement}

    def task_ip_infringement(self, ctx: "RuntimeContext", args: Sequence[str]) -> str:
        ctx.log.info("[Clarity] Running AI IP-infringement detection...")
        return "Ran IP infringement detection."

    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str:
        ctx.log.warn(f"[Clarity] Self-healing triggered by error {trigger.exit_code}.")
        ctx.log.info("[Clarity] Triggering model-drift self-repair...")
        return "Model-drift self-repair triggered."


__all__ = ["ClarityProject"]
