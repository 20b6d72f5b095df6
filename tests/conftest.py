"""Shared pytest fixtures."""

import pytest


@pytest.fixture
def anyio_backend():
    """Async tests run on asyncio; the executor is built on it."""
    return "asyncio"
