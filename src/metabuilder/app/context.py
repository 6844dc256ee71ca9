"""Process-wide runtime context handed to every component."""

from __future__ import annotations

import getpass
import os
from pathlib import Path
from typing import Callable, Sequence

from metabuilder.adapters.audit_sink import AuditSink
from metabuilder.adapters.console import Console
from metabuilder.adapters.forensic_store import ForensicStore
from metabuilder.adapters.host import HostEnvironment, detect_host
from metabuilder.adapters.llm_client import LLMClient
from metabuilder.adapters.log_sink import LogSink
from metabuilder.adapters.process import SubprocessToolRunner
from metabuilder.config import OperatorConfig, load_config
from metabuilder.domain import GLOBAL_PROJECT, ProjectDefinition, utc_timestamp
from metabuilder.ports.tool_runner import ToolRunner
from metabuilder.settings import RuntimeSettings


def determine_operator() -> str:
    operator = os.environ.get("METABUILDER_OPERATOR")
    if operator:
        return operator.strip()
    try:
        return getpass.getuser()
    except Exception:  # noqa: BLE001
        return "unknown"


class RuntimeContext:
    """Everything a run shares: settings, sinks, tool runner and the loaded project."""

    def __init__(
        self,
        settings: RuntimeSettings,
        *,
        config: OperatorConfig | None = None,
        tools: ToolRunner | None = None,
        console: Console | None = None,
        workdir: Path | None = None,
        actor: str | None = None,
        host_detector: Callable[[], HostEnvironment] = detect_host,
        llm: LLMClient | None = None,
    ) -> None:
        self.settings = settings
        self.console = console or Console(color=settings.color)
        self.workdir = (workdir or Path.cwd()).resolve()
        self.tools = tools or SubprocessToolRunner(self.workdir)
        self.actor = actor or determine_operator()
        self.start_time = utc_timestamp()
        self.log = LogSink(settings.log_dir, self.console, verbose=settings.verbose)
        self.audit = AuditSink(settings.audit_file, self.actor, lambda: self.project_name)
        self.forensics = ForensicStore(settings.forensic_dir)
        self._host_detector = host_detector
        self._host: HostEnvironment | None = None
        self._llm = llm
        self._project: ProjectDefinition | None = None
        self._config = config

    @property
    def config(self) -> OperatorConfig:
        if self._config is None:
            self._config = load_config(self.settings.config_file)
        return self._config

    @property
    def project(self) -> ProjectDefinition | None:
        return self._project

    @property
    def project_name(self) -> str:
        return self._project.name if self._project else GLOBAL_PROJECT

    def bind_project(self, definition: ProjectDefinition) -> None:
        if self._project is not None and self._project != definition:
            raise RuntimeError("A project is already bound to this runtime context")
        self._project = definition

    @property
    def llm(self) -> LLMClient | None:
        if self._llm is None and self.config.ai_endpoint:
            self._llm = LLMClient(
                self.config.ai_endpoint,
                token_env=self.config.ai_token_env,
                timeout=self.config.ai_timeout,
            )
        return self._llm

    def detect_host(self) -> HostEnvironment:
        if self._host is None:
            host = self._host_detector()
            if not host.can_install:
                self.log.warn("Unsupported Linux distribution. Package management may fail.")
            self.log.info(f"Detected OS: {host.os_type} (Package Manager: {host.package_manager})")
            self._host = host
        return self._host

    def install_packages(self, packages: Sequence[str]) -> str:
        names = [name for name in packages if name]
        host = self.detect_host()
        if not host.can_install:
            self.log.warn("Cannot install packages. Unknown package manager.")
        self.log.info(f"Installing packages: {' '.join(names)}")
        for argv in host.install_commands(names):
            self.tools.run(argv)
        return f"Installed packages: {' '.join(names)}"

    def resolve(self, path: str | Path) -> Path:
        candidate = Path(path).expanduser()
        if candidate.is_absolute():
            return candidate
        return self.workdir / candidate


__all__ = ["RuntimeContext", "determine_operator"]
