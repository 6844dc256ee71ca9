"""Script generation factory: templated artifacts carrying the compliance header."""

from __future__ import annotations

import re
import shlex
import stat
from pathlib import Path
from textwrap import dedent

from metabuilder.domain import ArtifactKind

COMPLIANCE_HEADER = (
    "Copyright © 2025 Enterprise Meta-Builder authors.",
    "All Rights Reserved.",
    "",
    "SPDX-License-Identifier: Apache-2.0",
    "",
    "Generated by: Enterprise Meta-Builder",
)

_COMMENT_PREFIX = {
    ArtifactKind.SCRIPT: "#",
    ArtifactKind.PYTHON: "#",
    ArtifactKind.JAVA: "//",
}

_DESCRIPTIONS = {
    ArtifactKind.SCRIPT: "Bash script",
    ArtifactKind.PYTHON: "Python module",
    ArtifactKind.JAVA: "Java class",
}


def _one_line(text: str) -> str:
    return " ".join(text.splitlines())


def _quoted(text: str) -> str:
    """Double-quoted literal valid in both Java and Python source."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    escaped = escaped.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
    return f'"{escaped}"'


def header_lines(kind: ArtifactKind, project: str, name: str) -> list[str]:
    prefix = _COMMENT_PREFIX[kind]
    lines = [*COMPLIANCE_HEADER, f"Project: {_one_line(project)}", f"Artifact: {_one_line(name)}"]
    return [f"{prefix} {line}".rstrip() for line in lines]


def _java_class_name(name: str) -> str:
    parts = [part for part in re.split(r"[^0-9A-Za-z]+", Path(name).stem) if part]
    candidate = "".join(part[:1].upper() + part[1:] for part in parts) or "Generated"
    return candidate if candidate[0].isalpha() else f"Generated{candidate}"


def render_artifact(kind: ArtifactKind, name: str, project: str) -> str:
    header = "\n".join(header_lines(kind, project, name))
    message = f"Executing {_one_line(name)}"
    if kind is ArtifactKind.SCRIPT:
        body = dedent(
            f"""
            set -eEuo pipefail

            log_info() {{
              echo "[$(date -u +"%Y-%m-%dT%H:%M:%SZ")] [INFO] $1"
            }}

            main() {{
              log_info {shlex.quote(message)}
            }}

            main "$@"
            """
        )
        return f"#!/usr/bin/env bash\n#\n{header}\n#\n{body}"
    if kind is ArtifactKind.PYTHON:
        body = dedent(
            f'''
            {_quoted(_one_line(name) + ".")}

            import logging

            LOGGER = logging.getLogger(__name__)


            def main() -> int:
                LOGGER.info({_quoted(message)})
                return 0


            if __name__ == "__main__":
                raise SystemExit(main())
            '''
        )
        return f"{header}\n{body}"
    class_name = _java_class_name(name)
    body = dedent(
        f"""
        public final class {class_name} {{
            public static void main(String[] args) {{
                System.out.println({_quoted(message)});
            }}
        }}
        """
    )
    return f"{header}\n{body}"


def write_artifact(kind: ArtifactKind, name: str, project: str, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_artifact(kind, name, project), encoding="utf-8")
    if kind is ArtifactKind.SCRIPT:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def describe(kind: ArtifactKind) -> str:
    return _DESCRIPTIONS[kind]


__all__ = ["COMPLIANCE_HEADER", "describe", "header_lines", "render_artifact", "write_artifact"]
