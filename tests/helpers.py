"""Shared constants and helpers for ddq tests."""

from aioresponses import aioresponses

TEST_BASE_URL = "https://api.example.com"
TEST_API_KEY = "test-api-key-0123456789"
TEST_APP_KEY = "test-app-key-9876543210"


def request_count(mocked: aioresponses) -> int:
    """Total number of requests aioresponses has seen."""
    return sum(len(calls) for calls in mocked.requests.values())
