"""Pytest configuration and fixtures."""

import pytest
import respx

from mattermost_client.mmrestapi import ConnectionData, MattermostClient, Token
from tests.helpers import BASE_URL


@pytest.fixture
def connection() -> ConnectionData:
    """Plain-HTTP connection settings matching BASE_URL."""
    return ConnectionData(hostname="mm.test", port=8065, use_tls=False)


@pytest.fixture
def token() -> Token:
    return Token("tok-123")


@pytest.fixture
def mock_api():
    """Activate respx mock for the test server base URL."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as rsps:
        yield rsps


@pytest.fixture
def events() -> list:
    """List collecting every event handed to the client's sink."""
    return []


@pytest.fixture
def client(
    mock_api: respx.MockRouter,  # noqa: ARG001
    connection: ConnectionData,
    events: list,
) -> MattermostClient:
    """MattermostClient wired to the mocked transport and an event list."""
    return MattermostClient(connection, logger=events.append)
