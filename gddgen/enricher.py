"""Build enriched entities from Swagger 2.0 fragments.

Each ``from_*`` function takes the raw definition of one entity plus the
mapping table and returns the finished, frozen entity. Missing optional
metadata (format, readOnly, response schema, ...) leaves the matching
field unset; nothing here raises on incomplete input.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Any

import structlog

from .dependencies import collect_required_models
from .loader import ref_name
from .models import Model, Operation, Parameter, Property
from .naming import (
    sanitize_name,
    to_relative_file_path,
    to_resource_name,
    to_variable_name,
)
from .type_mapping import map_type
from .type_resolver import (
    ResolvedType,
    resolve_schema_type,
    resolve_serializable_parameter,
    source_token,
)

logger = structlog.get_logger(__name__)


def _build_property(
    type_mapping: Mapping[str, str],
    name: str,
    schema: dict[str, Any],
    resolved: ResolvedType,
    required: bool,
    reserved_words: Collection[str],
) -> Property:
    """Property for an already resolved schema, recursing into container items."""
    items = None
    if resolved.item is not None:
        key = "items" if resolved.container == "array" else "additionalProperties"
        items = _build_property(
            type_mapping, name, schema.get(key) or {}, resolved.item, False, reserved_words,
        )

    return Property(
        name=to_variable_name(name, reserved_words),
        base_name=name,
        datatype=resolved.canonical_type,
        base_type=resolved.base_type,
        complex_type=resolved.complex_type,
        format=schema.get("format"),
        is_read_only=schema.get("readOnly"),
        # Set for every property; renderers only use it when the type is not primitive.
        filename=to_relative_file_path(resolved.complex_type or resolved.base_type),
        is_primitive_type=resolved.is_primitive,
        is_container=resolved.container is not None,
        container_type=resolved.container,
        items=items,
        required=required,
        description=schema.get("description"),
        enum=schema.get("enum"),
        default=schema.get("default"),
    )


def from_property(
    type_mapping: Mapping[str, str],
    name: str,
    schema: dict[str, Any] | None,
    required: bool = False,
    reserved_words: Collection[str] = (),
) -> Property:
    """Enrich one property schema: format, readOnly flag and file reference."""
    schema = schema or {}
    resolved = resolve_schema_type(type_mapping, schema)
    return _build_property(type_mapping, name, schema, resolved, required, reserved_words)


def _collect_properties(
    model_name: str,
    schema: dict[str, Any],
    definitions: Mapping[str, Any],
    seen: set[str],
) -> tuple[dict[str, Any], list[str]]:
    """Property schemas keyed by original name, plus required names.

    allOf members are merged in declared order; a $ref member is looked up
    in ``definitions`` and skipped when missing or already merged.
    """
    if "allOf" in schema:
        merged_props: dict[str, Any] = {}
        merged_required: list[str] = []
        for member in schema["allOf"]:
            if "$ref" in member:
                target = ref_name(member["$ref"])
                if target in seen:
                    continue
                seen.add(target)
                member = definitions.get(target)
                if member is None:
                    logger.debug("allOf reference not found", model=model_name, ref=target)
                    continue
            props, required = _collect_properties(model_name, member, definitions, seen)
            merged_props.update(props)
            merged_required.extend(r for r in required if r not in merged_required)
        return merged_props, merged_required

    properties = schema.get("properties")
    if properties is None:
        logger.debug("model has no properties", model=model_name)
        properties = {}
    return dict(properties), list(schema.get("required") or [])


def from_model(
    type_mapping: Mapping[str, str],
    name: str,
    schema: dict[str, Any],
    definitions: Mapping[str, Any] | None = None,
    known_models: Collection[str] | None = None,
    reserved_words: Collection[str] = (),
) -> Model:
    """Enrich one definition: filename, per-property format and required models.

    Properties are built straight from the original definition map, keyed
    by their original names, so sanitized variable names never drive a
    lookup.
    """
    definitions = definitions or {}
    property_schemas, required = _collect_properties(name, schema, definitions, {name})

    properties = [
        from_property(type_mapping, prop_name, prop_schema, prop_name in required, reserved_words)
        for prop_name, prop_schema in property_schemas.items()
    ]

    return Model(
        name=name,
        filename=to_relative_file_path(name),
        description=schema.get("description"),
        properties=properties,
        required=required,
        required_models=collect_required_models(name, properties, known_models),
    )


def from_parameter(
    type_mapping: Mapping[str, str],
    param: dict[str, Any],
    reserved_words: Collection[str] = (),
) -> Parameter:
    """Enrich one parameter with its format and primitive flag.

    Serializable parameters resolve through their type/format/items. Body
    parameters only get a primitive flag when their schema is an inline
    array; every other body shape leaves it unset.
    """
    name = param.get("name", "")
    location = param.get("in", "query")

    if location == "body":
        schema = param.get("schema") or {}
        resolved = resolve_schema_type(type_mapping, schema)
        return Parameter(
            base_name=name,
            param_name=to_variable_name(name, reserved_words),
            location=location,
            data_type=resolved.canonical_type,
            is_primitive_type=resolved.is_primitive if schema.get("type") == "array" else None,
            is_container=resolved.container is not None,
            required=param.get("required", False),
            description=param.get("description"),
        )

    param_type = param.get("type")
    resolved = resolve_serializable_parameter(type_mapping, param)
    if resolved is None:
        data_type = map_type(type_mapping, source_token(param_type, param.get("format")))
    else:
        data_type = resolved.canonical_type

    return Parameter(
        base_name=name,
        param_name=to_variable_name(name, reserved_words),
        location=location,
        data_type=data_type,
        format=param.get("format"),
        is_primitive_type=resolved.is_primitive if resolved is not None else None,
        is_container=param_type in ("array", "object"),
        required=param.get("required", False),
        description=param.get("description"),
        collection_format=param.get("collectionFormat"),
        default_value=param.get("default"),
        enum=param.get("enum"),
    )


def find_success_response(responses: Mapping[Any, Any] | None) -> dict[str, Any] | None:
    """First response in declared order with a 2xx status, else ``default``."""
    responses = responses or {}
    for code, response in responses.items():
        try:
            status = int(code)
        except (TypeError, ValueError):
            continue
        if 200 <= status <= 299:
            return response
    return responses.get("default")


def _generate_nickname(method: str, path: str) -> str:
    """Fallback operation id: "get", "/orders/{id}" -> "get_orders_id"."""
    segments = [segment.strip("{}") for segment in path.split("/") if segment]
    return sanitize_name("_".join([method, *segments]))


def from_operation(
    type_mapping: Mapping[str, str],
    path: str,
    method: str,
    operation: dict[str, Any],
    parameters: list[Parameter],
    reserved_words: Collection[str] = (),
) -> Operation:
    """Enrich one operation with its return type and return format."""
    return_type = return_is_primitive = return_format = None

    response = find_success_response(operation.get("responses"))
    schema = response.get("schema") if response else None
    if schema:
        resolved = resolve_schema_type(type_mapping, schema)
        return_type = resolved.canonical_type
        return_is_primitive = resolved.is_primitive
        return_format = schema.get("format")
    elif response is None:
        logger.debug("no success response", method=method, path=path)

    operation_id = operation.get("operationId")
    tags = operation.get("tags") or ["default"]

    return Operation(
        http_method=method.upper(),
        path=path,
        operation_id=operation_id,
        nickname=to_variable_name(operation_id or _generate_nickname(method, path), reserved_words),
        resource=to_resource_name(tags[0]),
        summary=operation.get("summary"),
        notes=operation.get("description"),
        parameters=parameters,
        return_type=return_type,
        return_is_primitive=return_is_primitive,
        return_format=return_format,
    )
