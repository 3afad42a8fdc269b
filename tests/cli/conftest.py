"""Shared fixtures for CLI tests."""

import json

import pytest

from ddq.api.client import DatadogClient
from ddq.cli.app import create_cli_app
from ddq.cli.state import CLIState
from ddq.domain.outcome import Success


@pytest.fixture
def test_app(test_settings):
    """Provide CLI app with test settings injected."""
    return create_cli_app(settings=test_settings)


@pytest.fixture
def mock_client(mocker):
    """Provide fully mocked DatadogClient with spec for type safety."""
    mock = mocker.AsyncMock(spec=DatadogClient)
    # Configure context manager behavior
    mock.__aenter__.return_value = mock
    mock.__aexit__.return_value = None
    success = Success(payload={"data": []})
    mock.query_logs.return_value = success
    mock.query_metrics.return_value = success
    mock.query_events.return_value = success
    mock.raw.return_value = success
    return mock


@pytest.fixture
def cli_state_with_mock_client(test_settings, mock_client):
    """CLIState that returns the mocked client."""

    def mock_client_factory(settings):
        return mock_client

    return CLIState(test_settings, client_factory=mock_client_factory)


@pytest.fixture
def app_with_mock_client(cli_state_with_mock_client):
    """CLI app with mocked client factory for testing."""
    return create_cli_app(state=cli_state_with_mock_client)


@pytest.fixture
def parse_error():
    """Parse the single JSON error envelope printed to stderr."""

    def _parse(result) -> dict:
        return json.loads(result.stderr)["error"]

    return _parse
