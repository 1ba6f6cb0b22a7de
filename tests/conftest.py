"""Shared fixtures for the gddgen tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import structlog

from gddgen.loader import load_spec
from gddgen.type_mapping import build_type_mapping

FIXTURES = Path(__file__).parent / "fixtures"
STORE_SPEC = FIXTURES / "store.json"


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def type_mapping():
    """Default read-only mapping table."""
    return build_type_mapping()


@pytest.fixture
def spec() -> dict[str, Any]:
    """Fresh copy of the store fixture for each test."""
    return load_spec(STORE_SPEC)
