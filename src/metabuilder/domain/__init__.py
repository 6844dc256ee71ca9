"""Domain exports for the meta-builder."""

from .capability import (
    AITaskKind,
    ArgumentContract,
    ArtifactKind,
    AuditAction,
    AuditReportKind,
    CapabilityKind,
    MetaCommand,
)
from .project import GLOBAL_PROJECT, CommandInvocation, ProjectDefinition
from .records import (
    AuditEntry,
    FailureTrigger,
    ForensicSnapshot,
    LogEntry,
    LogLevel,
    StackFrame,
    utc_timestamp,
)

__all__ = [
    "AITaskKind",
    "ArgumentContract",
    "ArtifactKind",
    "AuditAction",
    "AuditEntry",
    "AuditReportKind",
    "CapabilityKind",
    "CommandInvocation",
    "FailureTrigger",
    "ForensicSnapshot",
    "GLOBAL_PROJECT",
    "LogEntry",
    "LogLevel",
    "MetaCommand",
    "ProjectDefinition",
    "StackFrame",
    "utc_timestamp",
]
