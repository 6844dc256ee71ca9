"""Domain model for project definitions and operator invocations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple, Union

from .capability import CapabilityKind, MetaCommand

GLOBAL_PROJECT = "Global"


def _ordered_unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        item = str(value).strip()
        if item and item not in seen:
            seen[item] = None
    return tuple(seen)


@dataclass(frozen=True)
class ProjectDefinition:
    """Identity and metadata of one organization's plugin."""

    key: str
    name: str
    supported_languages: Tuple[str, ...] = ()
    build_tools: Tuple[str, ...] = ()
    primary_tool: str = ""

    def __post_init__(self) -> None:
        for field_name in ("key", "name"):
            value = getattr(self, field_name)
            if not value or not value.strip():
                raise ValueError(f"{field_name} must be provided")
            object.__setattr__(self, field_name, value.strip())
        object.__setattr__(self, "key", self.key.lower())
        object.__setattr__(self, "supported_languages", _ordered_unique(self.supported_languages))
        object.__setattr__(self, "build_tools", _ordered_unique(self.build_tools))
        object.__setattr__(self, "primary_tool", self.primary_tool.strip())

    def supports(self, language: str) -> bool:
        return language in self.supported_languages

    def as_dict(self) -> dict[str, object]:
        return {
            "key": self.key,
            "name": self.name,
            "languages": list(self.supported_languages),
            "build_tools": list(self.build_tools),
            "primary_tool": self.primary_tool,
        }


Command = Union[CapabilityKind, MetaCommand, None]


@dataclass(frozen=True)
class CommandInvocation:
    """One operator request: a single primary command plus its arguments."""

    command: Command
    arguments: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def is_capability(self) -> bool:
        return isinstance(self.command, CapabilityKind)

    def describe(self) -> str:
        if isinstance(self.command, CapabilityKind):
            head = self.command.flag
        elif isinstance(self.command, MetaCommand):
            head = f"--{self.command.value}"
        else:
            head = "<none>"
        return " ".join([head, *self.arguments])


__all__ = ["Command", "CommandInvocation", "GLOBAL_PROJECT", "ProjectDefinition"]
