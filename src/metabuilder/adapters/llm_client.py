"""HTTP client for the enterprise LLM endpoint used by AI-assist tasks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict

import requests

from metabuilder.domain.errors import RuntimeCapabilityFailure

DEFAULT_TOKEN_ENV = "ENTERPRISE_LLM_KEY"
DEFAULT_TIMEOUT = 30.0


@dataclass
class LLMAuthConfig:
    token_env: str = DEFAULT_TOKEN_ENV

    def resolve(self) -> str:
        token = os.environ.get(self.token_env)
        if not token:
            raise RuntimeCapabilityFailure(
                1,
                f"llm auth ({self.token_env})",
                f"LLM token missing in environment variable '{self.token_env}'",
            )
        return token


class LLMClient:
    def __init__(
        self,
        endpoint: str,
        *,
        token_env: str = DEFAULT_TOKEN_ENV,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._auth = LLMAuthConfig(token_env=token_env)
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def post(self, route: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self._endpoint}/v1/{route.lstrip('/')}"
        headers = {"Authorization": f"Bearer {self._auth.resolve()}"}
        try:
            response = self._session.post(url, json=payload, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise RuntimeCapabilityFailure(1, f"POST {url}", f"LLM request failed: {exc}") from exc
        if response.status_code >= 400:
            raise RuntimeCapabilityFailure(
                1,
                f"POST {url}",
                f"LLM endpoint returned HTTP {response.status_code}",
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise RuntimeCapabilityFailure(1, f"POST {url}", "LLM endpoint returned invalid JSON") from exc
        return data if isinstance(data, dict) else {"result": data}

    def validate(self, code: str) -> Dict[str, Any]:
        return self.post("validate", {"code": code})

    def semantic_commit(self, diff: str) -> str:
        data = self.post("semantic_commit", {"diff": diff})
        return str(data.get("message") or data.get("result") or "").strip()


__all__ = ["DEFAULT_TOKEN_ENV", "LLMAuthConfig", "LLMClient"]
