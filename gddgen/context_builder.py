"""Build the enriched model graph, file manifest and template context.

Walks the API description once: definitions in declared order, then
paths in declared order with their methods in a fixed order. The result
is handed to a renderer that writes one document per model plus one
aggregate API document.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Any

import structlog

from .config import Settings
from .enricher import from_model, from_operation, from_parameter
from .loader import get_definitions, get_paths, resolve_ref
from .logging import setup_logging
from .models import (
    ApiInfo,
    EnrichedModelGraph,
    FileManifest,
    ManifestEntry,
    Model,
    Operation,
)
from .naming import to_file_name, to_resource_name
from .type_mapping import build_type_mapping

logger = structlog.get_logger(__name__)

# Methods in the order operations are emitted for each path
_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")

DEFAULT_API_FILENAME = "api.json"


def _follow_ref(
    spec: dict[str, Any], node: dict[str, Any], kind: str, method: str, path: str,
) -> dict[str, Any] | None:
    """Follow a shared parameter/response $ref; None when it points nowhere."""
    if "$ref" not in node:
        return node
    try:
        return resolve_ref(spec, node["$ref"])
    except (KeyError, TypeError):
        logger.warning(f"{kind} reference not found", ref=node["$ref"], method=method, path=path)
        return None


def _resolve_responses(
    spec: dict[str, Any], responses: dict[Any, Any], method: str, path: str,
) -> dict[Any, Any]:
    """Responses with shared $refs followed, in declared order.

    A dangling reference keeps its status code with an empty response so
    success selection still sees it, but it carries no schema.
    """
    resolved: dict[Any, Any] = {}
    for code, response in responses.items():
        target = _follow_ref(spec, response or {}, "response", method, path)
        resolved[code] = target if target is not None else {}
    return resolved


def _merge_parameters(
    spec: dict[str, Any],
    shared: list[dict[str, Any]],
    own: list[dict[str, Any]],
    method: str,
    path: str,
) -> list[dict[str, Any]]:
    """Path-level parameters followed by the operation's own.

    An operation parameter replaces a path-level one with the same
    (name, in) pair, keeping the path-level position.
    """
    merged: dict[tuple[Any, Any], dict[str, Any]] = {}
    for param in [*shared, *own]:
        resolved = _follow_ref(spec, param, "parameter", method, path)
        if resolved is None:
            continue
        merged[(resolved.get("name"), resolved.get("in"))] = resolved
    return list(merged.values())


def _warn_filename_collisions(models: Mapping[str, Model]) -> None:
    """Warn when two models would be written to the same document."""
    owners: dict[str, str] = {}
    for name, model in models.items():
        if model.filename in owners:
            logger.warning(
                "model filename collision",
                filename=model.filename,
                models=[owners[model.filename], name],
            )
        else:
            owners[model.filename] = name


def _build_info(spec: dict[str, Any]) -> ApiInfo:
    """Document metadata; the name is the resource form of the title."""
    info = spec.get("info") or {}
    title = info.get("title") or "api"
    return ApiInfo(
        name=to_resource_name(title.replace(" ", "")),
        title=title,
        version=str(info.get("version", "")),
        description=info.get("description"),
        host=spec.get("host"),
        base_path=spec.get("basePath"),
    )


def build_graph(
    spec: dict[str, Any],
    type_mapping: Mapping[str, str] | None = None,
    reserved_words: Collection[str] = (),
) -> EnrichedModelGraph:
    """Walk the API description once and enrich every entity."""
    if type_mapping is None:
        type_mapping = build_type_mapping()

    definitions = get_definitions(spec)
    known_models = set(definitions)

    models: dict[str, Model] = {}
    for name, schema in definitions.items():
        models[name] = from_model(
            type_mapping, name, schema or {}, definitions, known_models, reserved_words,
        )
    _warn_filename_collisions(models)

    operations: list[Operation] = []
    for path, path_item in get_paths(spec).items():
        shared = path_item.get("parameters") or []
        for method in _METHODS:
            if method not in path_item:
                continue

            operation = path_item[method]
            raw_params = _merge_parameters(
                spec, shared, operation.get("parameters") or [], method, path,
            )
            params = [from_parameter(type_mapping, p, reserved_words) for p in raw_params]
            responses = _resolve_responses(spec, operation.get("responses") or {}, method, path)
            operations.append(
                from_operation(
                    type_mapping, path, method, {**operation, "responses": responses}, params, reserved_words,
                )
            )

    logger.info("model graph built", models=len(models), operations=len(operations))

    return EnrichedModelGraph(
        info=_build_info(spec),
        models=models,
        operations=operations,
    )


def build_manifest(
    graph: EnrichedModelGraph, api_filename: str = DEFAULT_API_FILENAME,
) -> FileManifest:
    """One entry per model document, then the aggregate API document."""
    entries = [
        ManifestEntry(kind="model", path=to_file_name(name) + ".json", model=name)
        for name in graph.models
    ]
    entries.append(ManifestEntry(kind="api", path=api_filename))
    return FileManifest(entries=entries)


def build_context(
    graph: EnrichedModelGraph, manifest: FileManifest | None = None,
) -> dict[str, Any]:
    """Assemble the renderer context from the graph."""
    if manifest is None:
        manifest = build_manifest(graph)

    resources: dict[str, list[str]] = {}
    for operation in graph.operations:
        resources.setdefault(operation.resource, []).append(operation.nickname)

    return {
        "info": graph.info.to_template_dict(),
        "models": [model.to_template_dict() for model in graph.models.values()],
        "operations": [operation.to_template_dict() for operation in graph.operations],
        "resources": resources,
        "manifest": [entry.to_template_dict() for entry in manifest.entries],
        "model_count": len(graph.models),
        "operation_count": len(graph.operations),
    }


def generate(
    spec: dict[str, Any], settings: Settings | None = None,
) -> tuple[EnrichedModelGraph, FileManifest]:
    """Run the pipeline with the given settings (defaults when omitted).

    Configures logging from the settings before the walk starts.
    """
    settings = settings or Settings()
    setup_logging(settings.log_level, settings.log_json)
    graph = build_graph(spec, settings.type_mapping(), settings.reserved_words)
    return graph, build_manifest(graph, settings.api_filename)
