from __future__ import annotations

import os
import shlex
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "global-home"
os.environ.setdefault("METABUILDER_HOME", str(SANDBOX_HOME))
SANDBOX_HOME.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from metabuilder.adapters.host import HostEnvironment  # noqa: E402
from metabuilder.app.context import RuntimeContext  # noqa: E402
from metabuilder.config import OperatorConfig  # noqa: E402
from metabuilder.domain.errors import RuntimeCapabilityFailure  # noqa: E402
from metabuilder.ports.tool_runner import ToolRunner  # noqa: E402
from metabuilder.settings import RuntimeSettings, build_settings  # noqa: E402

ACTOR = "tester"


class RecordingToolRunner(ToolRunner):
    """Records every command instead of launching it."""

    def __init__(
        self,
        *,
        missing: Iterable[str] = (),
        failures: Dict[str, int] | None = None,
        outputs: Dict[str, str] | None = None,
    ) -> None:
        self.calls: List[List[str]] = []
        self.missing = set(missing)
        self.failures = dict(failures or {})
        self.outputs = dict(outputs or {})

    def run(self, argv: Sequence[str], *, cwd: Path | None = None, capture: bool = False) -> str:
        args = [str(arg) for arg in argv]
        self.calls.append(args)
        command = shlex.join(args)
        for marker, code in self.failures.items():
            if marker in command:
                raise RuntimeCapabilityFailure(code, command)
        return self.outputs.get(command, "") if capture else ""

    def available(self, executable: str) -> bool:
        return executable not in self.missing

    def commands(self) -> List[str]:
        return [" ".join(call) for call in self.calls]


def apt_host() -> HostEnvironment:
    return HostEnvironment("linux", "apt-get")


@pytest.fixture
def runtime_settings(tmp_path: Path) -> RuntimeSettings:
    return build_settings(tmp_path / "home", color=False)


@pytest.fixture
def tools() -> RecordingToolRunner:
    return RecordingToolRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    directory = tmp_path / "work"
    directory.mkdir()
    user_home = tmp_path / "user"
    user_home.mkdir()
    monkeypatch.setenv("HOME", str(user_home))
    monkeypatch.setenv("METABUILDER_OPERATOR", ACTOR)
    monkeypatch.delenv("ENTERPRISE_LLM_KEY", raising=False)
    monkeypatch.chdir(directory)
    return directory


@pytest.fixture
def context(runtime_settings: RuntimeSettings, tools: RecordingToolRunner, workdir: Path) -> RuntimeContext:
    return RuntimeContext(
        runtime_settings,
        config=OperatorConfig(),
        tools=tools,
        workdir=workdir,
        actor=ACTOR,
        host_detector=apt_host,
    )
