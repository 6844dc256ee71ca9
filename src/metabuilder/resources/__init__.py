"""Packaged resources for the meta-builder."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Iterator, Tuple

from jsonschema import Draft202012Validator

__all__ = ["iter_schema_errors", "load_schema"]


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict[str, Any]:
    resource = resources.files(__name__) / name
    with resource.open("r", encoding="utf-8") as handle:
        return json.load(handle)


@lru_cache(maxsize=None)
def _validator(name: str) -> Draft202012Validator:
    return Draft202012Validator(load_schema(name))


def iter_schema_errors(name: str, document: Any) -> Iterator[Tuple[str, str]]:
    """Yield (path, message) pairs for schema violations in ``document``."""
    for error in _validator(name).iter_errors(document):
        path = ".".join(str(item) for item in error.absolute_path)
        yield path or "<root>", error.message
