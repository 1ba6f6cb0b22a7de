"""Collect which models each model references, for multi-file output.

Only direct references are recorded, one level deep. References are
never followed, so recursive and mutually recursive schemas terminate
after one pass over the property list.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping

import structlog

from .models import Model, Property

logger = structlog.get_logger(__name__)


def referenced_model(prop: Property) -> str | None:
    """Model named by a property, looking through array/map nesting."""
    if prop.is_primitive_type:
        return None
    return prop.complex_type


def collect_required_models(
    model_name: str,
    properties: Iterable[Property],
    known_models: Collection[str] | None = None,
) -> list[str]:
    """Distinct models referenced by ``properties``, excluding ``model_name``."""
    required: list[str] = []
    for prop in properties:
        name = referenced_model(prop)
        if name is None or name == model_name or name in required:
            continue
        if known_models is not None and name not in known_models:
            logger.debug("unknown model reference", model=model_name, property=prop.base_name, ref=name)
            continue
        required.append(name)
    return required


def collect_dependencies(models: Mapping[str, Model]) -> dict[str, list[str]]:
    """Edge map of the whole graph: model name -> required model names."""
    return {name: list(model.required_models) for name, model in models.items()}
