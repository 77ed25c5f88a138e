"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from borrowkit import CapabilityRegistry, Text
from borrowkit.config import get_settings


@pytest.fixture
def registry():
    """Fresh CapabilityRegistry with builtin declarations only."""
    return CapabilityRegistry()


@pytest.fixture
def promotions():
    """Record of every view -> owned promotion made through counting_registry."""
    return []


@pytest.fixture
def counting_registry(registry, promotions):
    """Registry declaring Text ~ str whose to_owned records each duplication."""

    def to_owned(view: str) -> Text:
        promotions.append(view)
        return Text(view)

    registry.register_equivalence(Text, str, project=Text.as_str, to_owned=to_owned, default=True)
    return registry


@pytest.fixture
def fresh_settings():
    """Settings are cached per process; reload them around a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
