"""Logging setup for a generation run, built on ``structlog``.

:func:`setup_logging` is called by :func:`gddgen.context_builder.generate`
with the run's settings. Events from the pipeline (graph summary, lookup
misses) go to stderr so stdout stays free for whatever the caller renders.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Shared by both renderers
_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _level(log_level: str) -> int:
    """Numeric level for a name; unknown names mean INFO."""
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Route pipeline events through structlog at ``log_level``.

    ``json_logs`` switches the console renderer for one JSON object per
    line. Loggers are not cached, so a later call (or
    ``structlog.reset_defaults``) takes effect for module-level loggers.
    """
    level = _level(log_level)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[*_PROCESSORS, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
