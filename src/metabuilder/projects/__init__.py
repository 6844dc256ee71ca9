"""Built-in organization plugins and the declarative project loader."""

from __future__ import annotations

from typing import Dict, Type

from .aegis import AegisProject
from .base import ProjectPlugin
from .chimera import ChimeraProject
from .clarity import ClarityProject
from .connect import ConnectProject
from .declarative import DeclarativeProject, load_declarative_project
from .orchard import OrchardProject
from .sentry import SentryProject
from .synergy import SynergyProject
from .veritas import VeritasProject

BUILTIN_PROJECTS: Dict[str, Type[ProjectPlugin]] = {
    plugin.definition.key: plugin
    for plugin in (
        AegisProject,
        ChimeraProject,
        ClarityProject,
        ConnectProject,
        OrchardProject,
        SentryProject,
        SynergyProject,
        VeritasProject,
    )
}

__all__ = [
    "AegisProject",
    "BUILTIN_PROJECTS",
    "ChimeraProject",
    "ClarityProject",
    "ConnectProject",
    "DeclarativeProject",
    "OrchardProject",
    "ProjectPlugin",
    "SentryProject",
    "SynergyProject",
    "VeritasProject",
    "load_declarative_project",
]
