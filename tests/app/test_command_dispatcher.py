from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from conftest import ACTOR, RecordingToolRunner
from metabuilder.app.capabilities import CapabilitySet, build_capability_set
from metabuilder.app.context import RuntimeContext
from metabuilder.app.defaults import DefaultCapabilityProvider
from metabuilder.app.dispatcher import CommandDispatcher, DispatchState
from metabuilder.app.supervisor import FailureSupervisor
from metabuilder.domain import AuditAction, CapabilityKind, CommandInvocation, ProjectDefinition
from metabuilder.domain.errors import (
    InsufficientArguments,
    MissingProject,
    NoCommandSpecified,
    RuntimeCapabilityFailure,
    UnexpectedArguments,
    UnsupportedAITask,
    UnsupportedArtifactKind,
    UnsupportedAuditReport,
)
from metabuilder.projects import ProjectPlugin, SentryProject


class RecordingProject(ProjectPlugin):
    definition = ProjectDefinition(key="recording", name="Recording Project", supported_languages=("go",))

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def compile(self, ctx: RuntimeContext, target: str | None) -> str | None:
        self.calls.append(("compile", target))
        return None

    def sync(self, ctx: RuntimeContext) -> str:
        self.calls.append(("sync",))
        raise RuntimeCapabilityFailure(4, "rclone sync")


def _dispatcher(context: RuntimeContext) -> CommandDispatcher:
    return CommandDispatcher(context, FailureSupervisor(context))


def _bind(context: RuntimeContext, plugin: ProjectPlugin) -> CapabilitySet:
    context.bind_project(plugin.definition)
    return build_capability_set(plugin, DefaultCapabilityProvider())


def _actions(context: RuntimeContext) -> List[AuditAction]:
    return [entry.action for entry in context.audit.entries()]


def test_success_writes_one_audit_entry_and_info(context: RuntimeContext, capsys: pytest.CaptureFixture[str]) -> None:
    plugin = RecordingProject()
    capabilities = _bind(context, plugin)
    dispatcher = _dispatcher(context)

    dispatcher.dispatch(CommandInvocation(CapabilityKind.COMPILE, ("//app",)), capabilities)

    assert plugin.calls == [("compile", "//app")]
    assert dispatcher.state is DispatchState.SUCCEEDED
    entries = list(context.audit.entries())
    assert [entry.action for entry in entries] == [AuditAction.COMPILE]
    assert entries[0].details == "Executed --compile //app"
    out = capsys.readouterr().out
    assert "Command '--compile' executed successfully" in out
    log_text = context.log.path.read_text(encoding="utf-8")
    assert "[DEBUG] Executing command: --compile with args: //app" in log_text


def test_dispatcher_dispatches_once(context: RuntimeContext) -> None:
    capabilities = _bind(context, RecordingProject())
    dispatcher = _dispatcher(context)
    dispatcher.dispatch(CommandInvocation(CapabilityKind.COMPILE), capabilities)
    with pytest.raises(RuntimeError):
        dispatcher.dispatch(CommandInvocation(CapabilityKind.COMPILE), capabilities)


def test_failure_propagates_and_marks_failed(context: RuntimeContext) -> None:
    capabilities = _bind(context, RecordingProject())
    dispatcher = _dispatcher(context)
    with pytest.raises(RuntimeCapabilityFailure):
        dispatcher.dispatch(CommandInvocation(CapabilityKind.SYNC), capabilities)
    assert dispatcher.state is DispatchState.FAILED
    assert _actions(context) == []


def test_validation_order(context: RuntimeContext) -> None:
    with pytest.raises(NoCommandSpecified):
        _dispatcher(context).dispatch(CommandInvocation(None), None)
    with pytest.raises(MissingProject):
        _dispatcher(context).dispatch(CommandInvocation(CapabilityKind.AUDIT), None)
    capabilities = _bind(context, RecordingProject())
    with pytest.raises(InsufficientArguments):
        _dispatcher(context).dispatch(CommandInvocation(CapabilityKind.AUDIT), capabilities)
    with pytest.raises(UnexpectedArguments):
        _dispatcher(context).dispatch(CommandInvocation(CapabilityKind.SYNC, ("now",)), capabilities)


@pytest.mark.parametrize(
    "invocation, error",
    [
        (CommandInvocation(CapabilityKind.AUDIT, ("unknown-type",)), UnsupportedAuditReport),
        (CommandInvocation(CapabilityKind.AI_ASSIST, ("summarize",)), UnsupportedAITask),
        (CommandInvocation(CapabilityKind.GENERATE, ("license", "LICENSE")), UnsupportedArtifactKind),
    ],
)
def test_unknown_names_fail_before_dispatch(context: RuntimeContext, invocation: CommandInvocation, error: type) -> None:
    capabilities = _bind(context, SentryProject())
    dispatcher = _dispatcher(context)
    with pytest.raises(error):
        dispatcher.dispatch(invocation, capabilities)
    assert dispatcher.state is DispatchState.IDLE
    assert _actions(context) == []


def test_known_report_without_handler_is_unsupported(context: RuntimeContext) -> None:
    capabilities = _bind(context, SentryProject())
    with pytest.raises(UnsupportedAuditReport):
        _dispatcher(context).dispatch(CommandInvocation(CapabilityKind.AUDIT, ("bias",)), capabilities)
    assert _actions(context) == []


def test_project_report_table_falls_back_to_defaults(context: RuntimeContext) -> None:
    capabilities = _bind(context, SentryProject())
    _dispatcher(context).dispatch(CommandInvocation(CapabilityKind.AUDIT, ("spdx",)), capabilities)
    entries = list(context.audit.entries())
    assert [entry.details for entry in entries] == ["Generated SPDX report."]


def test_generate_defaults_path_to_name(context: RuntimeContext, workdir: Path) -> None:
    capabilities = _bind(context, RecordingProject())
    _dispatcher(context).dispatch(CommandInvocation(CapabilityKind.GENERATE, ("python", "tool.py")), capabilities)
    assert (workdir / "tool.py").is_file()
    entry = list(context.audit.entries())[-1]
    assert entry.action is AuditAction.GENERATE
    assert str(workdir / "tool.py") in entry.details


def test_manual_heal_writes_trigger_without_snapshot(context: RuntimeContext, capsys: pytest.CaptureFixture[str]) -> None:
    capabilities = _bind(context, SentryProject())
    _dispatcher(context).dispatch(CommandInvocation(CapabilityKind.SELF_HEAL), capabilities)

    entries = list(context.audit.entries())
    assert [entry.action for entry in entries] == [AuditAction.SELF_HEAL_TRIGGER, AuditAction.SELF_HEAL]
    assert entries[0].details == f"Manual trigger by user {ACTOR}."
    assert entries[1].details == "EC2/Lambda self-repair invoked."
    assert context.forensics.incidents() == []
    out = capsys.readouterr().out
    assert "Manual self-heal triggered by user." in out
    assert "[Sentry] Self-healing triggered by error MANUAL." in out


def test_manual_heal_with_default_has_no_heal_entry(context: RuntimeContext, tools: RecordingToolRunner) -> None:
    capabilities = _bind(context, RecordingProject())
    _dispatcher(context).dispatch(CommandInvocation(CapabilityKind.SELF_HEAL), capabilities)
    assert _actions(context) == [AuditAction.SELF_HEAL_TRIGGER]
    assert "No default heal action for this command." in context.log.path.read_text(encoding="utf-8")
    assert tools.calls == []
