"""Capability kinds, audit actions and the closed sub-operation enums."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .errors import (
    InsufficientArguments,
    UnexpectedArguments,
    UnsupportedAITask,
    UnsupportedArtifactKind,
    UnsupportedAuditReport,
)


class AuditAction(str, Enum):
    INIT = "INIT"
    BOOTSTRAP = "BOOTSTRAP"
    COMPILE = "COMPILE"
    AUDIT = "AUDIT"
    AI_ASSIST = "AI_ASSIST"
    SYNC = "SYNC"
    SELF_HEAL = "SELF_HEAL"
    SELF_HEAL_TRIGGER = "SELF_HEAL_TRIGGER"
    GENERATE = "GENERATE"


class MetaCommand(str, Enum):
    HELP = "help"
    VERSION = "version"


@dataclass(frozen=True)
class ArgumentContract:
    """Positional slots a capability command accepts."""

    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()
    variadic: bool = False

    def usage(self, flag: str) -> str:
        parts = [flag]
        parts.extend(f"<{slot}>" for slot in self.required)
        parts.extend(f"[{slot}]" for slot in self.optional)
        if self.variadic:
            parts.append("[args...]")
        return " ".join(parts)

    def check(self, flag: str, arguments: Sequence[str]) -> None:
        if len(arguments) < len(self.required):
            missing = self.required[len(arguments)]
            raise InsufficientArguments(flag, missing, self.usage(flag))
        limit = len(self.required) + len(self.optional)
        if not self.variadic and len(arguments) > limit:
            raise UnexpectedArguments(flag, list(arguments[limit:]), self.usage(flag))


class CapabilityKind(str, Enum):
    """The seven capabilities every project supports, by override or default.

    The value doubles as the provider method name.
    """

    BOOTSTRAP = "bootstrap"
    COMPILE = "compile"
    AUDIT = "audit"
    AI_ASSIST = "ai_assist"
    SYNC = "sync"
    GENERATE = "generate"
    SELF_HEAL = "self_heal"

    @property
    def flag(self) -> str:
        return _FLAGS[self]

    @property
    def audit_action(self) -> AuditAction:
        return AuditAction[self.name]

    @property
    def contract(self) -> ArgumentContract:
        return _CONTRACTS[self]

    @classmethod
    def from_flag(cls, flag: str) -> "CapabilityKind":
        for kind, candidate in _FLAGS.items():
            if candidate == flag:
                return kind
        raise KeyError(flag)


_FLAGS = {
    CapabilityKind.BOOTSTRAP: "--bootstrap",
    CapabilityKind.COMPILE: "--compile",
    CapabilityKind.AUDIT: "--audit",
    CapabilityKind.AI_ASSIST: "--ai",
    CapabilityKind.SYNC: "--sync",
    CapabilityKind.GENERATE: "--generate",
    CapabilityKind.SELF_HEAL: "--heal",
}

_CONTRACTS = {
    CapabilityKind.BOOTSTRAP: ArgumentContract(),
    CapabilityKind.COMPILE: ArgumentContract(optional=("target",)),
    CapabilityKind.AUDIT: ArgumentContract(required=("report",)),
    CapabilityKind.AI_ASSIST: ArgumentContract(required=("task",), variadic=True),
    CapabilityKind.SYNC: ArgumentContract(),
    CapabilityKind.GENERATE: ArgumentContract(required=("type", "name"), optional=("path",)),
    CapabilityKind.SELF_HEAL: ArgumentContract(),
}


class AuditReportKind(str, Enum):
    SPDX = "spdx"
    LICENSE = "license"
    RISK = "risk"
    SHADOW_IT = "shadow-it"
    MBOM = "mbom"
    BIAS = "bias"
    TRAINING_DATA = "training-data"
    XAI = "xai"
    POLICY = "policy"
    TRANSPARENCY = "transparency"
    PRIVACY = "privacy"
    RISK_SCORE = "risk-score"
    CHAIN_OF_CUSTODY = "chain-of-custody"
    SUPPLY_CHAIN = "supply-chain"
    REGULATORY = "regulatory"
    PERFORMANCE = "performance"

    @classmethod
    def parse(cls, name: str) -> "AuditReportKind":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UnsupportedAuditReport(name) from None


class AITaskKind(str, Enum):
    VALIDATE = "validate"
    COMMIT = "commit"
    REMEDIATE = "remediate"
    IP_INFRINGEMENT = "ip-infringement"
    BLAST_RADIUS = "blast-radius"
    PREDICT_RISK = "predict-risk"
    MIGRATE_PLSQL = "migrate-plsql"

    @classmethod
    def parse(cls, name: str) -> "AITaskKind":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UnsupportedAITask(name) from None


class ArtifactKind(str, Enum):
    SCRIPT = "script"
    PYTHON = "python"
    JAVA = "java"

    @classmethod
    def parse(cls, name: str) -> "ArtifactKind":
        normalised = name.strip().lower()
        if normalised == "bash":
            return cls.SCRIPT
        try:
            return cls(normalised)
        except ValueError:
            raise UnsupportedArtifactKind(name) from None


__all__ = [
    "AITaskKind",
    "ArgumentContract",
    "ArtifactKind",
    "AuditAction",
    "AuditReportKind",
    "CapabilityKind",
    "MetaCommand",
]
