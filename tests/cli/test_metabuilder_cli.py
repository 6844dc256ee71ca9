from __future__ import annotations

import inspect
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List

import pytest

from conftest import ACTOR, RecordingToolRunner, apt_host
from metabuilder import __version__
from metabuilder.app import registry as registry_module
from metabuilder.app.context import RuntimeContext
from metabuilder.cli.main import main
from metabuilder.domain import AuditAction, AuditEntry, FailureTrigger, ProjectDefinition
from metabuilder.domain.errors import RuntimeCapabilityFailure
from metabuilder.projects import ProjectPlugin
from metabuilder.settings import RuntimeSettings

CHIMERA = "Project Chimera (Google)"


class FakeEntryPoint:
    def __init__(self, name: str, target: Any) -> None:
        self.name = name
        self.value = f"tests:{name}"
        self._target = target

    def load(self) -> Any:
        return self._target


class FailingProject(ProjectPlugin):
    definition = ProjectDefinition(key="failing", name="Failing Project", supported_languages=("go",))

    def compile(self, ctx: RuntimeContext, target: str | None) -> str:
        raise RuntimeCapabilityFailure(2, f"make {target or 'all'}")


class ExitingHealProject(FailingProject):
    definition = ProjectDefinition(key="exitingheal", name="Exiting Heal Project")

    def self_heal(self, ctx: RuntimeContext, trigger: FailureTrigger) -> str:
        raise SystemExit(0)


FAILING_LINE = inspect.getsourcelines(FailingProject.compile)[1] + 1


@pytest.fixture
def run(
    runtime_settings: RuntimeSettings,
    tools: RecordingToolRunner,
    workdir: Path,
    monkeypatch: pytest.MonkeyPatch,
):
    monkeypatch.setattr(
        registry_module,
        "iter_entry_points",
        lambda: [FakeEntryPoint("failing", FailingProject), FakeEntryPoint("exitingheal", ExitingHealProject)],
    )

    def invoke(*argv: str) -> int:
        return main(list(argv), settings=runtime_settings, tools=tools, host_detector=apt_host)

    return invoke


def _audit(settings: RuntimeSettings) -> List[AuditEntry]:
    if not settings.audit_file.exists():
        return []
    lines = settings.audit_file.read_text(encoding="utf-8").splitlines()
    return [AuditEntry.parse(line) for line in lines if line.strip()]


def _log(settings: RuntimeSettings) -> str:
    return settings.log_file_for(datetime.now(timezone.utc).strftime("%Y%m%d")).read_text(encoding="utf-8")


def _incidents(settings: RuntimeSettings) -> List[Path]:
    return sorted(settings.forensic_dir.glob("err_*.log")) if settings.forensic_dir.exists() else []


def test_chimera_bootstrap_uses_default(run, runtime_settings: RuntimeSettings, tools: RecordingToolRunner) -> None:
    assert run("--project", "chimera", "--bootstrap") == 0

    assert tools.commands() == ["sudo apt-get update", "sudo apt-get install -y git curl rclone gnupg"]
    entries = _audit(runtime_settings)
    assert [entry.action for entry in entries] == [AuditAction.INIT, AuditAction.BOOTSTRAP]
    assert all(entry.project == CHIMERA and entry.actor == ACTOR for entry in entries)
    assert entries[0].details == f"Loaded project framework: {CHIMERA}"
    assert entries[1].details == "Installed packages: git curl rclone gnupg"
    log = _log(runtime_settings)
    assert "[WARN] No project-specific bootstrap defined. Running global bootstrap." in log
    assert "Command '--bootstrap' executed successfully" in log


def test_unknown_audit_report_is_a_usage_error(
    run, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run("--project", "chimera", "--audit", "unknown-type") == 1

    assert [entry.action for entry in _audit(runtime_settings)] == [AuditAction.INIT]
    assert _incidents(runtime_settings) == []
    assert "error: Unsupported audit report" in capsys.readouterr().err


def test_generate_script_writes_header_and_audit(run, runtime_settings: RuntimeSettings, workdir: Path) -> None:
    assert run("--project", "chimera", "--generate", "script", "foo", "./foo.sh") == 0

    target = workdir.resolve() / "foo.sh"
    content = target.read_text(encoding="utf-8")
    assert "# SPDX-License-Identifier: Apache-2.0" in content
    assert f"# Project: {CHIMERA}" in content
    generate = _audit(runtime_settings)[-1]
    assert generate.action is AuditAction.GENERATE
    assert generate.details == f"Created Bash script at {target}"


def test_runtime_failure_is_supervised(
    run, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run("--project", "failing", "--compile") == 2

    err = capsys.readouterr().err
    assert f"Error 2 at line {FAILING_LINE}" in err
    assert "make all" in err
    incidents = _incidents(runtime_settings)
    assert len(incidents) == 1
    forensic = incidents[0].read_text(encoding="utf-8")
    assert "Project: Failing Project" in forensic
    assert "Error Code: 2" in forensic
    assert f"Line: {FAILING_LINE}" in forensic

    entries = _audit(runtime_settings)
    assert [entry.action for entry in entries] == [
        AuditAction.INIT,
        AuditAction.SELF_HEAL_TRIGGER,
        AuditAction.SELF_HEAL,
    ]
    assert str(incidents[0]) in entries[1].details
    assert AuditAction.COMPILE not in [entry.action for entry in entries]


def test_two_commands_fail_before_anything_runs(
    run, runtime_settings: RuntimeSettings, tools: RecordingToolRunner, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run("--project", "chimera", "--compile", "--sync") == 1

    assert tools.calls == []
    assert _audit(runtime_settings) == []
    assert "Only one command can be specified" in capsys.readouterr().err


def test_manual_heal_writes_no_forensic_file(run, runtime_settings: RuntimeSettings) -> None:
    assert run("--project", "sentry", "--heal") == 0

    assert _incidents(runtime_settings) == []
    entries = _audit(runtime_settings)
    assert [entry.action for entry in entries] == [
        AuditAction.INIT,
        AuditAction.SELF_HEAL_TRIGGER,
        AuditAction.SELF_HEAL,
    ]
    assert entries[1].details == f"Manual trigger by user {ACTOR}."
    assert entries[2].details == "EC2/Lambda self-repair invoked."


def test_no_arguments_prints_help_and_fails(run, capsys: pytest.CaptureFixture[str]) -> None:
    assert run() == 1
    out = capsys.readouterr().out
    assert "Enterprise Governance Meta-Builder" in out
    assert "--bootstrap" in out


def test_help_and_version_need_no_project(run, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    assert run("--help") == 0
    assert "Built-in projects:" in capsys.readouterr().out
    assert run("--version") == 0
    assert capsys.readouterr().out.splitlines()[0] == f"metabuilder {__version__}"
    assert _audit(runtime_settings) == []


@pytest.mark.parametrize(
    "argv",
    [
        ("--compile",),
        ("--project", "nosuchproject", "--compile"),
        ("--project", "--compile"),
        ("--project", "chimera", "--project", "sentry", "--compile"),
        ("--project", "chimera"),
        ("--project", "chimera", "--audit"),
        ("--project", "chimera", "--compile", "a", "b"),
        ("--bogus",),
    ],
)
def test_configuration_errors_exit_one(
    run, runtime_settings: RuntimeSettings, tools: RecordingToolRunner, argv: tuple
) -> None:
    assert run(*argv) == 1
    assert tools.calls == []
    assert _incidents(runtime_settings) == []
    assert "[ERROR]" in _log(runtime_settings)


def test_malformed_config_is_reported(run, runtime_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    runtime_settings.home_dir.mkdir(parents=True, exist_ok=True)
    runtime_settings.config_file.write_text("base_packages: [git\n", encoding="utf-8")

    assert run("--project", "chimera", "--bootstrap") == 1
    assert "is not valid YAML" in capsys.readouterr().err
    assert _audit(runtime_settings) == []


def test_declarative_project_from_working_directory(
    run, runtime_settings: RuntimeSettings, tools: RecordingToolRunner, workdir: Path
) -> None:
    (workdir / "nimbus.yaml").write_text(
        "name: Project Nimbus\ncapabilities:\n  compile:\n    steps:\n      - exec: [make, '{target}']\n",
        encoding="utf-8",
    )
    assert run("--project", "nimbus", "--compile", "release") == 0
    assert tools.commands() == ["make release"]
    assert _audit(runtime_settings)[-1].details == "Ran compile steps: step-1"


def test_session_end_is_logged_to_daily_file(run, runtime_settings: RuntimeSettings) -> None:
    run("--version")
    day = datetime.now(timezone.utc).strftime("%Y%m%d")
    log_file = runtime_settings.log_dir / f"meta_builder_{day}.log"
    assert log_file.exists()
    assert log_file.read_text(encoding="utf-8").rstrip().endswith("[INFO] Meta-Builder session finished.")


def test_self_heal_cannot_turn_failure_into_success(run, runtime_settings: RuntimeSettings) -> None:
    assert run("--project", "exitingheal", "--compile") == 2

    assert len(_incidents(runtime_settings)) == 1
    assert [entry.action for entry in _audit(runtime_settings)] == [AuditAction.INIT, AuditAction.SELF_HEAL_TRIGGER]
    assert "Self-heal failed: 0 [SystemExit]" in _log(runtime_settings)


def test_failure_is_supervised_when_forensic_dir_is_unusable(
    run, runtime_settings: RuntimeSettings, tools: RecordingToolRunner
) -> None:
    runtime_settings.home_dir.mkdir(parents=True, exist_ok=True)
    runtime_settings.forensic_dir.write_text("", encoding="utf-8")
    tools.failures["bazel build"] = 2

    assert run("--project", "chimera", "--compile") == 2

    entries = _audit(runtime_settings)
    assert [entry.action for entry in entries] == [
        AuditAction.INIT,
        AuditAction.SELF_HEAL_TRIGGER,
        AuditAction.SELF_HEAL,
    ]
    assert "Forensic log unavailable" in entries[1].details
    assert entries[2].details == "Chimera Jenkins pipeline heal triggered."
    assert _log(runtime_settings).rstrip().endswith("[INFO] Meta-Builder session finished.")
