"""Optional operator configuration loaded from ``<home>/config.yaml``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Tuple

import yaml

from metabuilder.adapters.llm_client import DEFAULT_TIMEOUT, DEFAULT_TOKEN_ENV
from metabuilder.domain.errors import ConfigFileError
from metabuilder.resources import iter_schema_errors

CONFIG_SCHEMA = "config.schema.json"
DEFAULT_BASE_PACKAGES = ("git", "curl", "rclone", "gnupg")
DEFAULT_SYNC_REMOTE = "enterprise_s3_secure:audit-logs/{project}/"


@dataclass(frozen=True)
class OperatorConfig:
    base_packages: Tuple[str, ...] = DEFAULT_BASE_PACKAGES
    sync_remote: str = DEFAULT_SYNC_REMOTE
    ai_endpoint: str | None = None
    ai_token_env: str = DEFAULT_TOKEN_ENV
    ai_timeout: float = DEFAULT_TIMEOUT

    def sync_target(self, project_name: str) -> str:
        return self.sync_remote.replace("{project}", project_name)


def load_config(path: Path) -> OperatorConfig:
    if not path.exists():
        return OperatorConfig()
    try:
        data: Any = yaml.safe_load(path.read_text("utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"Config file {path} is not valid YAML: {exc}") from exc
    errors = [f"{where}: {message}" for where, message in iter_schema_errors(CONFIG_SCHEMA, data)]
    if errors:
        raise ConfigFileError(f"Config file {path} is invalid: " + "; ".join(errors))
    sync = data.get("sync", {})
    ai = data.get("ai", {})
    return OperatorConfig(
        base_packages=tuple(data.get("base_packages", DEFAULT_BASE_PACKAGES)),
        sync_remote=sync.get("remote", DEFAULT_SYNC_REMOTE),
        ai_endpoint=ai.get("endpoint"),
        ai_token_env=ai.get("token_env", DEFAULT_TOKEN_ENV),
        ai_timeout=float(ai.get("timeout", DEFAULT_TIMEOUT)),
    )


__all__ = ["DEFAULT_BASE_PACKAGES", "DEFAULT_SYNC_REMOTE", "OperatorConfig", "load_config"]
