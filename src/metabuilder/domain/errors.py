"""Error taxonomy for the meta-builder."""

from __future__ import annotations


class MetaBuilderError(RuntimeError):
    """Base class for every error raised by the harness."""


class ConfigurationError(MetaBuilderError):
    """Operator mistake: surfaced immediately, never routed to self-heal."""


class UsageError(ConfigurationError):
    """Raised when the command line cannot be parsed."""


class MissingProjectName(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("Missing project name for --project flag.")


class ProjectNotFound(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Project configuration not found: {name}")
        self.name = name


class MultipleProjectsNotAllowed(ConfigurationError):
    def __init__(self, loaded: str, requested: str) -> None:
        super().__init__(
            f"Project '{loaded}' is already loaded; cannot load '{requested}' in the same run."
        )
        self.loaded = loaded
        self.requested = requested


class InvalidProjectFile(ConfigurationError):
    """Raised when a declarative project file fails validation."""


class ConfigFileError(ConfigurationError):
    """Raised when the operator config file is malformed."""


class NoCommandSpecified(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("No command specified. Use --help for options.")


class MultipleCommandsNotAllowed(ConfigurationError):
    def __init__(self, flags: list[str]) -> None:
        super().__init__(f"Only one command can be specified (got: {' '.join(flags)}).")
        self.flags = list(flags)


class MissingProject(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("You must specify a project using --project <name>.")


class InsufficientArguments(ConfigurationError):
    def __init__(self, flag: str, slot: str, usage: str) -> None:
        super().__init__(f"Missing <{slot}> for {flag}. Usage: {usage}")
        self.flag = flag
        self.slot = slot


class UnexpectedArguments(ConfigurationError):
    def __init__(self, flag: str, extra: list[str], usage: str) -> None:
        super().__init__(f"Unexpected arguments for {flag}: {' '.join(extra)}. Usage: {usage}")
        self.flag = flag
        self.extra = list(extra)


class UnsupportedAuditReport(ConfigurationError):
    def __init__(self, report: str) -> None:
        super().__init__(f"Unsupported audit report type: {report}")
        self.report = report


class UnsupportedAITask(ConfigurationError):
    def __init__(self, task: str) -> None:
        super().__init__(f"Unsupported AI task: {task}")
        self.task = task


class UnsupportedArtifactKind(ConfigurationError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"Unsupported generation type: {kind}")
        self.kind = kind


class RuntimeCapabilityFailure(MetaBuilderError):
    """An external action launched by a capability body failed."""

    def __init__(self, exit_code: int, command: str, message: str | None = None) -> None:
        super().__init__(message or f"Command failed with exit code {exit_code}: {command}")
        self.exit_code = exit_code
        self.command = command


class SelfHealFailure(MetaBuilderError):
    """Raised inside the supervisor when a self-heal body fails; never escapes it."""


__all__ = [
    "ConfigFileError",
    "ConfigurationError",
    "InsufficientArguments",
    "InvalidProjectFile",
    "MetaBuilderError",
    "MissingProject",
    "MissingProjectName",
    "MultipleCommandsNotAllowed",
    "MultipleProjectsNotAllowed",
    "NoCommandSpecified",
    "ProjectNotFound",
    "RuntimeCapabilityFailure",
    "SelfHealFailure",
    "UnexpectedArguments",
    "UnsupportedAITask",
    "UnsupportedArtifactKind",
    "UnsupportedAuditReport",
    "UsageError",
]
