"""Resolve Swagger type descriptors to canonical Discovery types.

Handles:
- $ref to a named definition (never primitive)
- arrays (primitive iff the item type is)
- maps via additionalProperties (primitive iff the value type is)
- scalar (type, format) pairs through the mapping table
- serializable parameters, including array/object without items
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .loader import ref_name
from .type_mapping import map_type

# (type, format) pairs that name a more specific source token
_FORMAT_TOKENS: dict[tuple[str, str], str] = {
    ("integer", "int64"): "long",
    ("number", "float"): "float",
    ("number", "double"): "double",
    ("string", "date"): "date",
    ("string", "date-time"): "date-time",
}


@dataclass(frozen=True)
class ResolvedType:
    """Canonical type of a descriptor.

    ``reference`` is the model name for a $ref; ``container`` is "array"
    or "map" and ``item`` the element type when the descriptor wraps one.
    """

    canonical_type: str
    is_primitive: bool
    base_type: str
    item: ResolvedType | None = None
    container: str | None = None
    reference: str | None = None

    @property
    def complex_type(self) -> str | None:
        """Model named by this type, looking through containers."""
        if self.reference is not None:
            return self.reference
        if self.item is not None:
            return self.item.complex_type
        return None


def source_token(schema_type: str | None, schema_format: str | None = None) -> str:
    """Source token for a scalar descriptor, e.g. ("integer", "int64") -> "long"."""
    if not schema_type:
        return "object"
    if schema_format:
        return _FORMAT_TOKENS.get((schema_type, schema_format), schema_type)
    return schema_type


def _resolve_scalar(
    type_mapping: Mapping[str, str],
    schema_type: str | None,
    schema_format: str | None,
) -> ResolvedType:
    """Map a (type, format) pair through the table; always primitive."""
    token = source_token(schema_type, schema_format)
    return ResolvedType(
        canonical_type=map_type(type_mapping, token),
        is_primitive=True,
        base_type=token,
    )


def _resolve_container(
    type_mapping: Mapping[str, str],
    container: str,
    item: ResolvedType,
) -> ResolvedType:
    """Wrap ``item`` as an array or map; primitive iff the item is."""
    return ResolvedType(
        canonical_type=map_type(type_mapping, container),
        is_primitive=item.is_primitive,
        base_type=container,
        item=item,
        container=container,
    )


def resolve_schema_type(
    type_mapping: Mapping[str, str],
    schema: dict[str, Any] | None,
) -> ResolvedType:
    """Resolve a schema or property descriptor to its canonical type."""
    schema = schema or {}

    if "$ref" in schema:
        name = ref_name(schema["$ref"])
        return ResolvedType(
            canonical_type=name,
            is_primitive=False,
            base_type=name,
            reference=name,
        )

    schema_type = schema.get("type")
    if schema_type == "array":
        item = resolve_schema_type(type_mapping, schema.get("items"))
        return _resolve_container(type_mapping, "array", item)

    additional = schema.get("additionalProperties")
    if schema_type in ("object", None) and isinstance(additional, dict):
        item = resolve_schema_type(type_mapping, additional)
        return _resolve_container(type_mapping, "map", item)

    return _resolve_scalar(type_mapping, schema_type, schema.get("format"))


def resolve_serializable_parameter(
    type_mapping: Mapping[str, str],
    param: dict[str, Any],
) -> ResolvedType | None:
    """Resolve a path/query/header/formData parameter.

    Returns None for a declared array or object without an ``items``
    descriptor: the primitive flag of such a parameter stays unset.
    """
    param_type = param.get("type")
    items = param.get("items")

    if param_type == "array":
        if items is None:
            return None
        return _resolve_container(type_mapping, "array", resolve_schema_type(type_mapping, items))

    if param_type == "object":
        if items is None:
            return None
        return _resolve_container(type_mapping, "map", resolve_schema_type(type_mapping, items))

    return _resolve_scalar(type_mapping, param_type, param.get("format"))
