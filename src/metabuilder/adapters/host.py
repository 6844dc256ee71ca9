"""Operating system and package manager detection."""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence

from metabuilder.domain.errors import RuntimeCapabilityFailure

UNKNOWN = "unknown"


@dataclass(frozen=True)
class HostEnvironment:
    os_type: str
    package_manager: str

    @property
    def can_install(self) -> bool:
        return self.package_manager != UNKNOWN

    def install_commands(self, packages: Sequence[str]) -> List[List[str]]:
        names = list(packages)
        if self.package_manager == "apt-get":
            return [["sudo", "apt-get", "update"], ["sudo", "apt-get", "install", "-y", *names]]
        if self.package_manager == "yum":
            return [["sudo", "yum", "install", "-y", *names]]
        if self.package_manager == "apk":
            return [["sudo", "apk", "add", *names]]
        if self.package_manager == "brew":
            return [["brew", "install", *names]]
        raise RuntimeCapabilityFailure(1, f"install {' '.join(names)}", "Cannot install packages. Unknown package manager.")


def detect_host(
    *,
    system: str | None = None,
    kernel: str | None = None,
    root: Path = Path("/"),
    which: Callable[[str], str | None] = shutil.which,
) -> HostEnvironment:
    system = system if system is not None else platform.system()
    kernel = kernel if kernel is not None else platform.platform()
    if system.startswith("Linux"):
        if "ish" in kernel.lower().split("-"):
            return HostEnvironment("ish", "apk")
        if (root / "etc" / "debian_version").exists():
            return HostEnvironment("linux", "apt-get")
        if (root / "etc" / "redhat-release").exists():
            return HostEnvironment("linux", "yum")
        return HostEnvironment("linux", UNKNOWN)
    if system.startswith("Darwin"):
        if which("brew") is None:
            raise RuntimeCapabilityFailure(1, "detect_os", "Homebrew (brew) not found. Please install it to continue.")
        return HostEnvironment("macos", "brew")
    raise RuntimeCapabilityFailure(1, "detect_os", f"Unsupported Operating System: {system}")


__all__ = ["HostEnvironment", "UNKNOWN", "detect_host"]
