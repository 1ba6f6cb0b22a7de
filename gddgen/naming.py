"""Convert API description identifiers to Discovery Document names.

Source names are mixed case; the output wants delimiter-separated
lowercase, one file per model with a predictable relative path.

Pattern: a separator goes between one lowercase letter and the run of
uppercase letters that follows it.

Examples:
  to_resource_name("UserAccount")      -> "user-account"
  to_variable_name("firstName")        -> "first_name"
  to_file_name("UserAccountID")        -> "user_account_id"
  to_relative_file_path("UserAccount") -> "./user_account.json"

Acronym runs are not split: "HTTPServer" -> "httpserver". File names and
cross-references depend on this exact rule, so it stays as is.
"""

from __future__ import annotations

import re
from collections.abc import Collection

_BOUNDARY = re.compile(r"([a-z])([A-Z]+)")

# Characters that become "_" before the remaining non-word characters are dropped
_SEPARATOR_CHARS = re.compile(r"[\-.\s\[(]")
_ILLEGAL_CHARS = re.compile(r"\W")


def _split_boundaries(name: str, separator: str) -> str:
    """Insert ``separator`` at each lower-to-upper boundary, then lowercase."""
    return _BOUNDARY.sub(rf"\1{separator}\2", name).lower()


def sanitize_name(name: str) -> str:
    """Strip characters that cannot appear in a variable name."""
    name = _SEPARATOR_CHARS.sub("_", name)
    return _ILLEGAL_CHARS.sub("", name)


def to_resource_name(name: str) -> str:
    """Resource (tag) name: "UserAccount" -> "user-account"."""
    return _split_boundaries(name, "-")


def to_variable_name(name: str, reserved_words: Collection[str] = ()) -> str:
    """Variable name for properties and parameters.

    Sanitizes the name and escapes reserved words with a leading
    underscore before splitting case boundaries with "_".
    """
    name = sanitize_name(name)
    if name in reserved_words:
        name = "_" + name
    return _split_boundaries(name, "_")


def to_file_name(name: str) -> str:
    """Model file name without extension: "UserAccount" -> "user_account"."""
    return _split_boundaries(name, "_")


def to_relative_file_path(name: str) -> str:
    """Sibling-relative path of a model document."""
    return "./" + to_file_name(name) + ".json"
