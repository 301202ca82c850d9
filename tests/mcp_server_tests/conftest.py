"""Pytest configuration for MCP server tests."""

import pytest

# Run anyio-marked tests on asyncio only
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
