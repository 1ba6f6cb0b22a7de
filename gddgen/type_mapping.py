"""Source type token -> Discovery Document type token.

Discovery Documents carry 64-bit integers and dates as strings and
collapse every floating type into ``number``. Tokens not listed here pass
through unchanged.

The table is built once and handed to the pipeline as a read-only view;
nothing in the package keeps a module-level registry that a second
generation run could see.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

DEFAULT_TYPE_MAPPING: Mapping[str, str] = MappingProxyType({
    "long": "string",
    "float": "number",
    "double": "number",
    "date": "string",
    "date-time": "string",
    "map": "object",
})


def build_type_mapping(overrides: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return a read-only mapping table, with ``overrides`` merged on top."""
    table = dict(DEFAULT_TYPE_MAPPING)
    if overrides:
        table.update(overrides)
    return MappingProxyType(table)


def map_type(type_mapping: Mapping[str, str], token: str) -> str:
    """Look up a source token, passing unknown tokens through."""
    return type_mapping.get(token, token)
