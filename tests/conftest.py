"""Pytest configuration and fixtures for the WhyFi tests."""

import pytest

from whyfi.models import MetricSnapshot

from .fakes import make_snapshot


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def sample_snapshot() -> MetricSnapshot:
    """A healthy 5 GHz connection."""
    return make_snapshot()
