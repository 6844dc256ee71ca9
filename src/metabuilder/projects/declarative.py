"""Projects described by a YAML file instead of Python code."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Tuple

import yaml

from metabuilder.domain import CapabilityKind, FailureTrigger, ProjectDefinition
from metabuilder.domain.errors import InvalidProjectFile
from metabuilder.resources import iter_schema_errors

from .base import ProjectPlugin

if TYPE_CHECKING:  # pragma: no cover
    from metabuilder.app.context import RuntimeContext

PROJECT_SCHEMA = "project.schema.json"
PROJECT_SUFFIXES = (".yaml", ".yml")
DEFAULT_TARGET = "all"


@dataclass(frozen=True)
class Step:
    name: str
    argv: Tuple[str, ...]

    def render(self, target: str) -> Tuple[str, ...]:
        return tuple(arg.replace("{target}", target) for arg in self.argv)


class DeclarativeProject(ProjectPlugin):
    """Runs declared steps through the tool runner; everything else is defaulted."""

    def __init__(self, definition: ProjectDefinition, steps: Mapping[CapabilityKind, Tuple[Step, ...]], source: Path) -> None:
        self.definition = definition
        self._steps = dict(steps)
        self.source = source

    @property
    def steps(self) -> Mapping[CapabilityKind, Tuple[Step, ...]]:
        return dict(self._steps)

    def method_for(self, kind: CapabilityKind) -> Callable[..., Optional[str]] | None:
        if kind not in self._steps:
            return None
        if kind is CapabilityKind.COMPILE:
            return self._compile
        if kind is CapabilityKind.SELF_HEAL:
            return self._self_heal
        return partial(self._run_steps, kind)

    def _run_steps(self, kind: CapabilityKind, ctx: "RuntimeContext", target: str = DEFAULT_TARGET) -> str:
        names = []
        for step in self._steps[kind]:
            argv = step.render(target)
            ctx.log.info(f"[{kind.value}] {step.name}: {shlex.join(argv)}")
            ctx.tools.run(argv)
            names.append(step.name)
        return f"Ran {kind.value} steps: {', '.join(names)}"

    def _compile(self, ctx: "RuntimeContext", target: str | None) -> str:
        return self._run_steps(CapabilityKind.COMPILE, ctx, target or DEFAULT_TARGET)

    def _self_heal(self, ctx: "RuntimeContext", trigger: FailureTrigger) -> str:
        ctx.log.warn(f"Running declared self-heal steps for error {trigger.exit_code}.")
        return self._run_steps(CapabilityKind.SELF_HEAL, ctx)


def _parse_steps(raw: Mapping[str, Any]) -> Dict[CapabilityKind, Tuple[Step, ...]]:
    parsed: Dict[CapabilityKind, Tuple[Step, ...]] = {}
    for capability, body in raw.items():
        kind = CapabilityKind(capability)
        steps = []
        for index, item in enumerate(body["steps"], start=1):
            argv = tuple(item["exec"])
            steps.append(Step(name=item.get("name") or f"step-{index}", argv=argv))
        parsed[kind] = tuple(steps)
    return parsed


def load_declarative_project(path: Path) -> DeclarativeProject:
    try:
        data: Any = yaml.safe_load(path.read_text("utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidProjectFile(f"Project file {path} is not valid YAML: {exc}") from exc
    errors = [f"{where}: {message}" for where, message in iter_schema_errors(PROJECT_SCHEMA, data)]
    if errors:
        raise InvalidProjectFile(f"Project file {path} is invalid: " + "; ".join(errors))
    definition = ProjectDefinition(
        key=path.stem,
        name=data["name"],
        supported_languages=tuple(data.get("languages", ())),
        build_tools=tuple(data.get("build_tools", ())),
        primary_tool=data.get("primary_tool", ""),
    )
    return DeclarativeProject(definition, _parse_steps(data.get("capabilities", {})), path)


def find_project_file(key: str, *directories: Path) -> Path | None:
    for directory in directories:
        for suffix in PROJECT_SUFFIXES:
            candidate = directory / f"{key}{suffix}"
            if candidate.is_file():
                return candidate
    return None


__all__ = [
    "DeclarativeProject",
    "PROJECT_SUFFIXES",
    "Step",
    "find_project_file",
    "load_declarative_project",
]
