"""Fixtures specific to unit tests."""

import pytest

from spinshelf.api.base_client import DiscogsClient
from spinshelf.auth.signer import AuthContext, RequestSigner
from spinshelf.common.call_queue import CallQueue
from spinshelf.common.config import ClientConfig


class RecordingSleep:
    """Stand-in for asyncio.sleep that records backoff delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def client_config() -> ClientConfig:
    """Provide a client configuration with a fixed User-Agent."""
    return ClientConfig(user_agent="spinshelf-tests/1.0 +https://example.com")


@pytest.fixture
def fixed_signer() -> RequestSigner:
    """Provide a signer with a frozen clock and nonce."""
    return RequestSigner(clock=lambda: 1700000000.5, nonce_factory=lambda: "n0nce")


@pytest.fixture
def user_auth() -> AuthContext:
    """Provide level 2 auth through a personal user token."""
    return AuthContext(user_token="user-token-123")


@pytest.fixture
def consumer_auth() -> AuthContext:
    """Provide level 1 auth through a consumer key and secret."""
    return AuthContext(consumer_key="ck", consumer_secret="cs")


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_client(client_config, http_config, recording_sleep):
    """Factory for DiscogsClient instances whose backoff sleeps are recorded."""

    def _make(auth=None, queue=None, **overrides) -> DiscogsClient:
        config = client_config.model_copy(update=overrides)
        client = DiscogsClient(
            config=config,
            auth=auth,
            queue=queue or CallQueue(),
            http_config=http_config,
        )
        client._sleep = recording_sleep
        return client

    return _make
