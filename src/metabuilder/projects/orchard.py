"""Project Orchard (Apple): privacy-first governance across the Apple ecosystem."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from metabuilder.domain import AuditReportKind, FailureTrigger, ProjectDefinition
from metabuilder.domain.errors import RuntimeCapabilityFailure
from metabuilder.ports.capability_provider import AuditHandler

from .base import ProjectPlugin

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext


class OrchardProject(ProjectPlugin):
    definition = ProjectDefinition(
        key="orchard",
        name="Project Orchard (Apple)",
        supported_languages=("swift", "objc", "cpp"),
        build_tools=("make", "jenkins", "xcodebuild"),
        primary_tool="make",
    )

    def bootstrap(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Orchard] Bootstrapping environment...")
        host = ctx.detect_host()
        if host.os_type != "macos":
            ctx.log.error("[Orchard] Requires macOS and Xcode. Aborting.")
            raise RuntimeCapabilityFailure(1, "orchard bootstrap", "Orchard requires macOS and Xcode.")
        ctx.install_packages(["make", "rclone"])
        ctx.log.info("[Orchard] Verifying Xcode and SDKs...")
        return "Orchard macOS environment verified."

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str:
        # the Makefile wraps xcodebuild per scheme and SDK
        target = target or "all"
        ctx.log.info(f"[Orchard] Compiling Swift/Obj-C targets with Make (wrapping xcodebuild): {target}")
        ctx.tools.run(["make", target])
        return "Orchard Make/xcodebuild successful."

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {AuditReportKind.PRIVACY: self.report_privacy}

    def report_privacy(self, ctx: "RuntimeContext") -> str:
        ctx.log.info("[Orchard] Running privacy analyzers and Secure Enclave API checks...")
        return "Ran privacy-first analyzer."

    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str:
        ctx.log.warn(f"[Orchard] Self-healing triggered by error {trigger.exit_code}.")
        ctx.log.info("[Orchard] Healing cross-platform dependencies...")
        return "Cross-platform dependency healing."


__all__ = ["OrchardProject"]
