"""Shared pytest fixtures for all tests."""

import pytest
import respx

from spinshelf.common.config import Config, HTTPConfig, LoggingConfig


@pytest.fixture(autouse=True)
def clear_discogs_env_vars(monkeypatch):
    """Clear Discogs environment variables so real credentials never leak into tests."""
    monkeypatch.delenv("DISCOGS_USER_TOKEN", raising=False)
    monkeypatch.delenv("DISCOGS_CONSUMER_KEY", raising=False)
    monkeypatch.delenv("DISCOGS_CONSUMER_SECRET", raising=False)


@pytest.fixture
def sample_config() -> Config:
    """Provide a sample configuration for tests."""
    return Config(
        http=HTTPConfig(
            timeout=30,
            max_redirects=5,
            verify_ssl=True,
        ),
        logging=LoggingConfig(
            level="DEBUG",
            format="text",
            handlers=["console"],
        ),
    )


@pytest.fixture
def http_config() -> HTTPConfig:
    """Provide a sample HTTP configuration for tests."""
    return HTTPConfig(
        timeout=10,
        max_redirects=3,
        verify_ssl=True,
    )


@pytest.fixture
def mock_http():
    """Provide a respx mock for httpx requests."""
    with respx.mock:
        yield respx


@pytest.fixture
def rate_limit_headers() -> dict:
    """Rate-limit headers as sent by Discogs for an authenticated client."""
    return {
        "X-Discogs-Ratelimit": "60",
        "X-Discogs-Ratelimit-Used": "23",
        "X-Discogs-Ratelimit-Remaining": "37",
    }
