"""Runtime settings for the meta-builder."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from metabuilder import __version__

HOME_ENV = "METABUILDER_HOME"
_DISABLE_VALUES = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    log_dir: Path
    forensic_dir: Path
    projects_dir: Path
    color: bool = True
    verbose: bool = False
    cli_version: str = __version__

    @property
    def config_file(self) -> Path:
        return self.home_dir / "config.yaml"

    @property
    def audit_file(self) -> Path:
        return self.log_dir / "meta_builder_audit.log"

    def log_file_for(self, day: str) -> Path:
        return self.log_dir / f"meta_builder_{day}.log"

    def with_overrides(self, *, color: bool | None = None, verbose: bool | None = None) -> "RuntimeSettings":
        return replace(
            self,
            color=self.color if color is None else color,
            verbose=self.verbose if verbose is None else verbose,
        )


def _default_home_dir() -> Path:
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".logs" / "meta_builder"


def _color_enabled() -> bool:
    # Presence of NO_COLOR disables colour regardless of its value.
    if "NO_COLOR" in os.environ:
        return False
    return os.environ.get("METABUILDER_COLOR", "1").strip().lower() not in _DISABLE_VALUES


def build_settings(home_dir: Path, *, color: bool = True, verbose: bool = False) -> RuntimeSettings:
    return RuntimeSettings(
        home_dir=home_dir,
        log_dir=home_dir,
        forensic_dir=home_dir / "forensic_logs",
        projects_dir=home_dir / "projects",
        color=color,
        verbose=verbose,
    )


def load_settings() -> RuntimeSettings:
    return build_settings(_default_home_dir(), color=_color_enabled())


__all__ = ["HOME_ENV", "RuntimeSettings", "build_settings", "load_settings"]
