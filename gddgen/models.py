"""Enriched entities handed to the Discovery Document renderer.

Every entity is built complete by a single enrichment call and frozen.
``None`` means "not specified" and is kept distinct from ``False``;
``to_template_dict`` drops unset fields and uses the camelCase keys the
templates expect (``isPrimitiveType``, ``returnFormat``, ...).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_template_dict(self) -> dict[str, Any]:
        """Renderer view: camelCase keys, unset fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Property(_Entity):
    """A field of a model, or the item type of a container."""

    name: str
    base_name: str
    datatype: str
    base_type: str
    complex_type: str | None = None
    format: str | None = None
    is_read_only: bool | None = None
    filename: str
    is_primitive_type: bool
    is_container: bool = False
    container_type: str | None = None  # array / map
    items: Property | None = None
    required: bool = False
    description: str | None = None
    enum: list[Any] | None = None
    default: Any = None


class Model(_Entity):
    """A named schema object, emitted as its own document."""

    name: str
    filename: str
    description: str | None = None
    properties: list[Property] = Field(default_factory=list)
    required: list[str] = Field(default_factory=list)
    required_models: list[str] = Field(default_factory=list)


class Parameter(_Entity):
    """One operation input."""

    base_name: str
    param_name: str
    location: str  # path / query / header / formData / body
    data_type: str
    format: str | None = None
    is_primitive_type: bool | None = None
    is_container: bool = False
    required: bool = False
    description: str | None = None
    collection_format: str | None = None
    default_value: Any = None
    enum: list[Any] | None = None


class Operation(_Entity):
    """One endpoint/method pair."""

    http_method: str
    path: str
    operation_id: str | None = None
    nickname: str
    resource: str
    summary: str | None = None
    notes: str | None = None
    parameters: list[Parameter] = Field(default_factory=list)
    return_type: str | None = None
    return_is_primitive: bool | None = None
    return_format: str | None = None


class ApiInfo(_Entity):
    """Document-level metadata for the aggregate API document."""

    name: str
    title: str
    version: str
    description: str | None = None
    host: str | None = None
    base_path: str | None = None


class EnrichedModelGraph(_Entity):
    """Output of one generation run; read-only for the renderer."""

    info: ApiInfo
    models: dict[str, Model] = Field(default_factory=dict)
    operations: list[Operation] = Field(default_factory=list)


class ManifestEntry(_Entity):
    """One file the renderer should write."""

    kind: Literal["model", "api"]
    path: str
    model: str | None = None


class FileManifest(_Entity):
    entries: list[ManifestEntry] = Field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]
