# tests/conftest.py

import pytest

from kairos import Kairos, KairosConfig, build_default_context


@pytest.fixture
def k():
    """Fresh context with every shipped plugin, UTC, en-US."""
    return build_default_context(KairosConfig())


@pytest.fixture
def bare():
    """Context without plugins."""
    return Kairos()
