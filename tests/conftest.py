"""Pytest configuration and fixtures for ddq tests."""

import os
import typing as t

import loguru
import pytest
import pytest_asyncio
from aiohttp import ClientSession
from aioresponses import aioresponses
from blockbuster import BlockBuster, blockbuster_ctx
from pydantic import SecretStr
from typer.testing import CliRunner

from ddq.cli.app import create_cli_app
from ddq.config.settings import Environment, LogLevel, Settings
from ddq.domain.credentials import Credentials
from ddq.infrastructure.http import AiohttpClient
from ddq.infrastructure.logging import reset_logging
from tests.helpers import TEST_API_KEY, TEST_APP_KEY, TEST_BASE_URL


@pytest.fixture
def blockbuster() -> t.Iterator[BlockBuster]:
    """Detect blocking calls made by ddq code inside the event loop.

    Not autouse: request it where the code under test runs on a stubbed
    transport, so third-party setup (sessions, SSL contexts) stays out
    of scope.
    """
    with blockbuster_ctx(scanned_modules=["ddq"]) as bb:
        yield bb


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's Datadog/ddq environment out of the tests."""
    for name in list(os.environ):
        if name.startswith(("DD_", "DDQ_")):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def clean_logging_state():
    """Automatically reset logging before each test for isolation."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def test_settings() -> Settings:
    """Provide test-specific settings with fast retries."""
    return Settings(
        api_key=TEST_API_KEY,
        app_key=TEST_APP_KEY,
        site=TEST_BASE_URL,
        retries=2,
        retry_backoff_ms=10,
        retry_max_backoff_ms=100,
        timeout_seconds=5,
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,  # Minimal logging during tests
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        api_key=SecretStr(TEST_API_KEY), app_key=SecretStr(TEST_APP_KEY)
    )


@pytest.fixture
def mock_logger(mocker):
    """Provide a mock logger for testing that captures log calls."""
    logger = mocker.Mock(spec=loguru.logger)
    return logger


@pytest.fixture
def sleep_mock(mocker):
    """Awaitable stand-in for asyncio.sleep that records backoff delays."""
    return mocker.AsyncMock(return_value=None)


@pytest.fixture
def mock_aioresponse() -> t.Iterator[aioresponses]:
    """Stub every aiohttp request made during the test."""
    with aioresponses() as mocked:
        yield mocked


@pytest_asyncio.fixture
async def http_client() -> t.AsyncIterator[AiohttpClient]:
    """Provide an AiohttpClient over a plain session (no TLS setup)."""
    session = ClientSession()
    async with AiohttpClient(session=session) as client:
        yield client
    await session.close()


# CLI-specific fixtures (shared across all tests)


@pytest.fixture
def cli_runner():
    """Provide Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def default_app():
    """Provide CLI app with default settings."""
    return create_cli_app()
