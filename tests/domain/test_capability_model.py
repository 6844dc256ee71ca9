from __future__ import annotations

import pytest

from metabuilder.domain import (
    AITaskKind,
    ArtifactKind,
    AuditAction,
    AuditReportKind,
    CapabilityKind,
    CommandInvocation,
    MetaCommand,
    ProjectDefinition,
)
from metabuilder.domain.errors import (
    ConfigurationError,
    InsufficientArguments,
    UnexpectedArguments,
    UnsupportedAITask,
    UnsupportedArtifactKind,
    UnsupportedAuditReport,
)


def test_every_capability_has_flag_and_audit_action() -> None:
    flags = {kind.flag for kind in CapabilityKind}
    assert flags == {"--bootstrap", "--compile", "--audit", "--ai", "--sync", "--generate", "--heal"}
    assert CapabilityKind.AI_ASSIST.audit_action is AuditAction.AI_ASSIST
    assert CapabilityKind.SELF_HEAL.audit_action is AuditAction.SELF_HEAL
    assert CapabilityKind.from_flag("--heal") is CapabilityKind.SELF_HEAL
    with pytest.raises(KeyError):
        CapabilityKind.from_flag("--deploy")


def test_argument_contracts_enforce_arity() -> None:
    CapabilityKind.COMPILE.contract.check("--compile", [])
    CapabilityKind.COMPILE.contract.check("--compile", ["//app"])
    with pytest.raises(UnexpectedArguments) as excinfo:
        CapabilityKind.COMPILE.contract.check("--compile", ["//app", "//lib"])
    assert excinfo.value.extra == ["//lib"]

    with pytest.raises(InsufficientArguments) as missing:
        CapabilityKind.AUDIT.contract.check("--audit", [])
    assert missing.value.slot == "report"

    with pytest.raises(InsufficientArguments) as missing_name:
        CapabilityKind.GENERATE.contract.check("--generate", ["script"])
    assert missing_name.value.slot == "name"
    assert "--generate <type> <name> [path]" in str(missing_name.value)

    CapabilityKind.AI_ASSIST.contract.check("--ai", ["validate", "a.py", "b.py", "c.py"])
    with pytest.raises(UnexpectedArguments):
        CapabilityKind.BOOTSTRAP.contract.check("--bootstrap", ["now"])


def test_closed_enums_reject_unknown_names() -> None:
    assert AuditReportKind.parse("SPDX") is AuditReportKind.SPDX
    assert AuditReportKind.parse("chain-of-custody") is AuditReportKind.CHAIN_OF_CUSTODY
    assert AITaskKind.parse("migrate-plsql") is AITaskKind.MIGRATE_PLSQL
    assert ArtifactKind.parse("bash") is ArtifactKind.SCRIPT
    with pytest.raises(UnsupportedAuditReport):
        AuditReportKind.parse("unknown-type")
    with pytest.raises(UnsupportedAITask):
        AITaskKind.parse("summarize")
    with pytest.raises(UnsupportedArtifactKind):
        ArtifactKind.parse("license")


def test_configuration_errors_share_a_base() -> None:
    for error in (UnsupportedAuditReport("x"), UnsupportedAITask("y"), UnsupportedArtifactKind("z")):
        assert isinstance(error, ConfigurationError)


def test_project_definition_normalises_metadata() -> None:
    definition = ProjectDefinition(
        key=" Chimera ",
        name="Project Chimera (Google)",
        supported_languages=("go", "python", "go", " "),
        build_tools=("bazel", "bazel", "jenkins"),
        primary_tool=" bazel ",
    )
    assert definition.key == "chimera"
    assert definition.supported_languages == ("go", "python")
    assert definition.build_tools == ("bazel", "jenkins")
    assert definition.primary_tool == "bazel"
    assert definition.supports("go")
    assert definition.as_dict()["languages"] == ["go", "python"]


def test_project_definition_requires_a_name() -> None:
    with pytest.raises(ValueError):
        ProjectDefinition(key="empty", name="  ")


def test_invocation_describes_itself() -> None:
    invocation = CommandInvocation(CapabilityKind.GENERATE, ["script", "foo"])
    assert invocation.is_capability
    assert invocation.arguments == ("script", "foo")
    assert invocation.describe() == "--generate script foo"
    assert CommandInvocation(MetaCommand.VERSION).describe() == "--version"
    assert CommandInvocation(None).describe() == "<none>"
