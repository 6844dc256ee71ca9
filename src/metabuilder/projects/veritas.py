"""Project Veritas (Oracle): licensing and performance optimization in hybrid Oracle stacks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Sequence

from metabuilder.domain import AITaskKind, AuditReportKind, ProjectDefinition
from metabuilder.ports.capability_provider import AITaskHandler, AuditHandler

from .base import ProjectPlugin

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext


class VeritasProject(ProjectPlugin):
    """Ant and Make builds; self-heal falls back to the shared default."""

    definition = ProjectDefinition(
        key="veritas",
        name="Project Veritas (Oracle)",
        supported_languages=("java", "plsql", "cpp"),
        build_tools=("ant", "make", "sqlplus"),
        primary_tool="ant",
    )

    def bootstrap(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Veritas] Bootstrapping environment...")
        ctx.install_packages(["ant", "make", "openjdk-17"])
        ctx.log.info("[Veritas] Installing Oracle Instant Client...")
        return "Veritas environment bootstrapped with Oracle client."

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str:
        target = target or "all"
        ctx.log.info(f"[Veritas] Compiling Java targets with Apache Ant: {target}")
        ctx.tools.run(["ant", target])
        ctx.log.info("[Veritas] Compiling C++ OCI targets with Make...")
        ctx.tools.run(["make", "-C", "./cpp_modules"])
        return "Veritas Ant/Make build successful."

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {
            AuditReportKind.LICENSE: self.report_license,
            AuditReportKind.PERFORMANCE: self.report_performance,
        }

    def report_license(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Veritas] Running Oracle license auditor scripts...")
        return "Ran Oracle license audit."

    def report_performance(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Veritas] Running performance optimization scripts...")
        return "Ran performance tuning report."

    def ai_handlers(self) -> Mapping[AITaskKind, AITaskHandler]:
        return {AITaskKind.MIGRATE_PLSQL: self.task_migrate_plsql}

    def task_migrate_plsql(self, ctx: "RuntimeContext", args: Sequence[str]) -> str:
        ctx.log.info("[Veritas] Running AI-assisted stored-procedure migration...")
        return "Ran PL/SQL migration analysis."


__all__ = ["VeritasProject"]
