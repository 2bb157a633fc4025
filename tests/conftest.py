"""Shared pytest configuration."""

import pytest


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Run anyio-marked tests on asyncio only (trio is not installed)."""
    return request.param
