"""Project registry: name to capability set, one project per run."""

from __future__ import annotations

import re
from dataclasses import dataclass
from importlib import metadata
from typing import Callable, Iterable, Mapping, Type

from metabuilder.domain import AuditAction, ProjectDefinition
from metabuilder.domain.errors import MissingProjectName, MultipleProjectsNotAllowed, ProjectNotFound
from metabuilder.projects import BUILTIN_PROJECTS, ProjectPlugin
from metabuilder.projects.declarative import find_project_file, load_declarative_project

from .capabilities import CapabilitySet, build_capability_set
from .context import RuntimeContext
from .defaults import DefaultCapabilityProvider

ENTRY_POINT_GROUP = "metabuilder.projects"

_VALID_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=ENTRY_POINT_GROUP)


@dataclass(frozen=True)
class LoadedProject:
    definition: ProjectDefinition
    capabilities: CapabilitySet
    origin: str


class ProjectRegistry:
    """Resolves a project name to a fully bound capability set."""

    def __init__(
        self,
        context: RuntimeContext,
        *,
        builtins: Mapping[str, Type[ProjectPlugin]] | None = None,
        entry_points: Callable[[], Iterable[metadata.EntryPoint]] | None = None,
        defaults: DefaultCapabilityProvider | None = None,
    ) -> None:
        self._context = context
        self._builtins = dict(BUILTIN_PROJECTS if builtins is None else builtins)
        self._entry_points = entry_points or iter_entry_points
        self._defaults = defaults or DefaultCapabilityProvider()
        self._loaded: LoadedProject | None = None
        self._requested: str | None = None

    @property
    def loaded(self) -> LoadedProject | None:
        return self._loaded

    def load_project(self, name: str | None) -> LoadedProject:
        if name is None or not name.strip():
            raise MissingProjectName()
        key = name.strip().lower()
        if self._loaded is not None:
            if key == self._requested:
                return self._loaded
            raise MultipleProjectsNotAllowed(self._loaded.definition.name, name.strip())
        if not _VALID_NAME.match(key):
            raise ProjectNotFound(name.strip())

        plugin, origin = self._resolve(key, name.strip())
        capabilities = build_capability_set(plugin, self._defaults)
        self._context.bind_project(plugin.definition)
        self._loaded = LoadedProject(plugin.definition, capabilities, origin)
        self._requested = key

        message = f"Loaded project framework: {plugin.definition.name}"
        self._context.log.info(message)
        self._context.audit.record(AuditAction.INIT, message)
        overrides = ", ".join(kind.value for kind in capabilities.overrides()) or "none"
        self._context.log.debug(f"Capability overrides for {plugin.definition.name}: {overrides}")
        return self._loaded

    def _resolve(self, key: str, requested: str) -> tuple[ProjectPlugin, str]:
        settings = self._context.settings
        path = find_project_file(key, self._context.workdir, settings.projects_dir)
        if path is not None:
            return load_declarative_project(path), str(path)
        for entry_point in self._entry_points():
            if entry_point.name.lower() != key:
                continue
            loaded = entry_point.load()
            plugin = loaded if isinstance(loaded, ProjectPlugin) else loaded()
            if not isinstance(plugin, ProjectPlugin):
                raise TypeError(f"Entry point {entry_point.value} did not provide a ProjectPlugin")
            return plugin, f"entry point {entry_point.value}"
        plugin_cls = self._builtins.get(key)
        if plugin_cls is None:
            raise ProjectNotFound(requested)
        return plugin_cls(), "built-in"


__all__ = ["ENTRY_POINT_GROUP", "LoadedProject", "ProjectRegistry", "iter_entry_points"]
