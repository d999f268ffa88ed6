"""Shared test fixtures for the Sales Copilot test suite."""

from __future__ import annotations

import os
from unittest.mock import MagicMock

import pytest

from sales_copilot.config import ApolloConfig, UnipileConfig


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    This runs before any imports, so ``get_settings()`` won't fail when the
    server lifespan runs under TestClient.
    """
    os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key-123")
    os.environ.setdefault("APOLLO_API_KEY", "test-apollo-key-456")
    os.environ.setdefault("UNIPILE_DSN", "api1.unipile.test:13111")
    os.environ.setdefault("UNIPILE_API_KEY", "test-unipile-key-789")
    os.environ.setdefault("UNIPILE_ACCOUNT_ID", "acc-default")


def make_response(data, status_code: int = 200) -> MagicMock:
    """A stand-in for ``httpx.Response`` with the attributes the clients read."""
    mock = MagicMock()
    mock.status_code = status_code
    mock.json.return_value = data
    mock.text = data if isinstance(data, str) else str(data)
    return mock


@pytest.fixture
def mock_response():
    """Factory fixture for creating mock API responses."""
    return make_response


@pytest.fixture
def apollo_config() -> ApolloConfig:
    return ApolloConfig(api_key="apollo-test-key")


@pytest.fixture
def unipile_config() -> UnipileConfig:
    return UnipileConfig(dsn="api1.unipile.test:13111", api_key="unipile-test-key", account_id="acc-1")
