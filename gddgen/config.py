"""Generator settings.

Uses ``pydantic-settings`` so values can be overridden via environment
variables prefixed with ``GDDGEN_``. Settings are read by the caller and
passed into the pipeline; the pipeline never looks them up itself.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic_settings import BaseSettings

from .type_mapping import build_type_mapping


class Settings(BaseSettings):
    """Settings for a generation run.

    Attributes:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Emit one JSON object per log line instead of console output.
        type_mapping_overrides: Extra or replacement source -> target type tokens.
        reserved_words: Names escaped with a leading underscore when used as variables.
        api_filename: File name of the aggregate API document.
    """

    log_level: str = "INFO"
    log_json: bool = False
    type_mapping_overrides: dict[str, str] = {}
    reserved_words: list[str] = []
    api_filename: str = "api.json"

    model_config = {"env_prefix": "GDDGEN_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def type_mapping(self) -> Mapping[str, str]:
        """Read-only mapping table with the configured overrides applied."""
        return build_type_mapping(self.type_mapping_overrides)
