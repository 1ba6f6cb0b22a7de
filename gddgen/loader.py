"""Load a Swagger 2.0 API description and reach into it.

Reads a JSON document and exposes the paths, definitions and shared
parameters the pipeline walks.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load the API description from disk."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the API description."""
    return spec.get("paths") or {}


def get_definitions(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract model definitions from the API description."""
    return spec.get("definitions") or {}


def ref_name(ref: str) -> str:
    """Last segment of a $ref pointer: "#/definitions/Pet" -> "Pet"."""
    return ref.rsplit("/", 1)[-1]


def resolve_ref(spec: dict[str, Any], ref: str) -> dict[str, Any]:
    """Resolve a local $ref pointer in the API description.

    Raises KeyError when the pointer names something that is not there.
    """
    parts = ref.lstrip("#/").split("/")
    node = spec
    for part in parts:
        node = node[part]
    return node
