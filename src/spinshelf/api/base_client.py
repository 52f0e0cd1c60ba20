"""Discogs API client with request throttling and rate-limit aware retries."""

import asyncio
import os
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .models import RateLimitedResponse, RequestSpec
from ..auth.signer import AuthContext, AuthLevel, RequestSigner, auth_from_mapping
from ..common.call_queue import CallQueue
from ..common.config import ClientConfig, Config, HTTPConfig, package_version
from ..common.http_client import AsyncHTTPClient
from ..core.exceptions import AuthError, DiscogsError, RateLimitExceededError

if TYPE_CHECKING:
    from .database import DatabaseAPI
    from .inventory import InventoryAPI
    from .marketplace import MarketplaceAPI
    from .user import UserAPI
    from ..auth.oauth import DiscogsOAuth

logger = structlog.get_logger(__name__)

ENV_USER_TOKEN = "DISCOGS_USER_TOKEN"
ENV_CONSUMER_KEY = "DISCOGS_CONSUMER_KEY"
ENV_CONSUMER_SECRET = "DISCOGS_CONSUMER_SECRET"


def _is_server_rate_limited(exception: BaseException) -> bool:
    """True for 429 responses from the server; a full local queue is not retried."""
    return (
        isinstance(exception, DiscogsError)
        and not isinstance(exception, RateLimitExceededError)
        and exception.status_code == 429
    )


class DiscogsClient:
    """
    Client for the Discogs API.

    Every request goes through the same pipeline: auth level check, call
    queue admission, signed HTTP request, and a retry with exponential
    backoff when the server answers 429. Results come back as
    RateLimitedResponse objects carrying the server's rate-limit snapshot.

    Each client owns a private CallQueue unless one is passed in. Passing
    the same queue to several clients makes them share one call budget.

    Authentication:
    - Personal user token (``AuthContext(user_token=...)``), level 2
    - Consumer key and secret, level 1
    - OAuth 1.0a access token (``method="oauth"``), level 2
    - Environment variables DISCOGS_USER_TOKEN, DISCOGS_CONSUMER_KEY and
      DISCOGS_CONSUMER_SECRET take precedence over config in from_config()

    Example:
        >>> import asyncio
        >>> from spinshelf import DiscogsClient, AuthContext
        >>>
        >>> async def main():
        ...     auth = AuthContext(user_token="my-token")
        ...     async with DiscogsClient(auth=auth) as client:
        ...         release = await client.database().get_release(249504)
        ...         print(release.data["title"], release.rate_limit)
        >>>
        >>> asyncio.run(main())
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        auth: Optional[AuthContext] = None,
        queue: Optional[CallQueue] = None,
        http_config: Optional[HTTPConfig] = None,
        signer: Optional[RequestSigner] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the Discogs client.

        Args:
            config: Client configuration (defaults to ClientConfig())
            auth: Credentials; None for anonymous access
            queue: Call queue to admit requests through (default: a private queue)
            http_config: HTTP transport configuration
            signer: Authorization header builder
            user_agent: Custom User-Agent, overriding the config value
        """
        self.config = config or ClientConfig()
        if user_agent:
            self.config = self.config.model_copy(update={"user_agent": user_agent})
        self.auth = auth
        self.queue = queue or CallQueue()
        self.http_config = http_config or HTTPConfig()
        self.signer = signer or RequestSigner()
        self._transport = AsyncHTTPClient(self.http_config)
        self._sleep = asyncio.sleep
        self.logger = logger.bind(component="discogs_client")

        self._sync_queue()

        self.logger.info(
            "discogs_client_initialized",
            base_url=self.config.base_url,
            auth_method=self.auth.method.value if self.auth else "none",
            auth_level=int(self.auth.level) if self.auth else 0,
            user_agent=self.config.user_agent,
        )

    @classmethod
    def from_config(
        cls, config: Config, queue: Optional[CallQueue] = None
    ) -> "DiscogsClient":
        """
        Create a client from the root Config.

        Credentials are read from ``config.auth``; the DISCOGS_* environment
        variables take precedence.

        Args:
            config: Root configuration
            queue: Shared call queue (optional; otherwise a private queue sized
                by config.queue.max_stack)

        Returns:
            Configured DiscogsClient instance
        """
        values: Dict[str, str] = dict(config.auth or {})
        for env_name, key in (
            (ENV_USER_TOKEN, "user_token"),
            (ENV_CONSUMER_KEY, "consumer_key"),
            (ENV_CONSUMER_SECRET, "consumer_secret"),
        ):
            env_value = os.environ.get(env_name)
            if env_value:
                values[key] = env_value

        auth = auth_from_mapping(values) if values else None

        return cls(
            config=config.client,
            auth=auth,
            queue=queue or CallQueue(max_stack=config.queue.max_stack),
            http_config=config.http,
        )

    async def __aenter__(self) -> "DiscogsClient":
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self._transport.__aexit__(exc_type, exc_val, exc_tb)

    def _request_limit(self) -> int:
        if self.authenticated(AuthLevel.CONSUMER):
            return self.config.request_limit_auth
        return self.config.request_limit

    def _sync_queue(self) -> None:
        self.queue.set_config(
            max_calls=self._request_limit(),
            interval=self.config.request_limit_interval,
        )

    def set_config(self, **overrides: Any) -> "DiscogsClient":
        """
        Override configuration values.

        The merged configuration is validated, and the call budget is pushed
        to the queue. Changes apply to subsequent calls.

        Example:
            >>> client.set_config(output_format="html", request_limit_interval=30000)
        """
        self.config = ClientConfig(**{**self.config.model_dump(), **overrides})
        self._sync_queue()
        self.logger.debug("discogs_client_reconfigured", overrides=sorted(overrides))
        return self

    def authenticated(self, level: int = AuthLevel.NONE) -> bool:
        """Return whether the client holds at least the given auth level."""
        return self.auth is not None and self.auth.level >= level

    def _build_url(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        if not url:
            return self.config.base_url + "/"
        return f"{self.config.base_url}/{url.lstrip('/')}"

    def _headers(self, method: str, url: str) -> Dict[str, str]:
        headers = {
            "User-Agent": self.config.user_agent,
            "Accept": self.config.accept_header,
        }
        authorization = self.signer.authorization_header(method, url, self.auth)
        if authorization:
            headers["Authorization"] = authorization
        return headers

    async def _send(self, spec: RequestSpec) -> RateLimitedResponse:
        if spec.queue:
            admission = await self.queue.acquire()
            self.logger.debug(
                "discogs_request_admitted",
                url=spec.url,
                calls_remaining=admission.calls_remaining,
                stack_remaining=admission.stack_remaining,
            )

        url = self._build_url(spec.url)
        response = await self._transport.send(
            spec.method,
            url,
            headers=self._headers(spec.method, url),
            body=spec.data,
            expect_json=spec.json_response,
        )

        if response.rate_limit:
            self.logger.debug(
                "discogs_rate_limit_headers",
                total=response.rate_limit.limit,
                used=response.rate_limit.used,
                remaining=response.rate_limit.remaining,
            )

        return RateLimitedResponse(data=response.data, rate_limit=response.rate_limit)

    def _log_retry_attempt(self, retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        self.logger.warning(
            "discogs_rate_limited_retry",
            attempt=retry_state.attempt_number,
            wait_seconds=round(retry_state.next_action.sleep, 3) if retry_state.next_action else None,
            message=getattr(exception, "message", None),
        )

    async def dispatch(self, spec: "RequestSpec | str") -> RateLimitedResponse:
        """
        Send a request through the queue, retrying on HTTP 429.

        A 429 response is retried up to ``exponential_backoff_max_retries``
        times, waiting ``interval_ms * rate ** retries_used`` before each new
        attempt. Every attempt is admitted through the queue again. When the
        retries are used up, the last server error is raised unchanged.

        Args:
            spec: RequestSpec, or a url for a plain queued GET

        Returns:
            RateLimitedResponse with the decoded data and rate-limit snapshot

        Raises:
            AuthError: If the request needs a higher auth level (no network call)
            RateLimitExceededError: If the call queue is full
            DiscogsError: If the server returns a status code above 399
            httpx.TransportError: On network failures (never retried)
        """
        spec = RequestSpec.coerce(spec)

        if spec.auth_level and not self.authenticated(spec.auth_level):
            raise AuthError()

        self.logger.debug("api_request", method=spec.method, url=spec.url)

        retrying = AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(self.config.exponential_backoff_max_retries + 1),
            wait=wait_exponential(
                multiplier=self.config.exponential_backoff_interval_ms / 1000.0,
                exp_base=self.config.exponential_backoff_rate,
            ),
            retry=retry_if_exception(_is_server_rate_limited),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                return await self._send(spec)

    async def get(self, spec: "RequestSpec | str") -> RateLimitedResponse:
        """Perform a GET request."""
        return await self.dispatch(RequestSpec.coerce(spec, method="GET"))

    @staticmethod
    def _with_body(spec: "RequestSpec | str", method: str, data: Any) -> RequestSpec:
        # A body already on the spec is kept unless one is passed explicitly
        if data is None:
            return RequestSpec.coerce(spec, method=method)
        return RequestSpec.coerce(spec, method=method, data=data)

    async def post(
        self, spec: "RequestSpec | str", data: Optional[Any] = None
    ) -> RateLimitedResponse:
        """Perform a POST request with an optional JSON body."""
        return await self.dispatch(self._with_body(spec, "POST", data))

    async def put(
        self, spec: "RequestSpec | str", data: Optional[Any] = None
    ) -> RateLimitedResponse:
        """Perform a PUT request with an optional JSON body."""
        return await self.dispatch(self._with_body(spec, "PUT", data))

    async def delete(self, spec: "RequestSpec | str") -> RateLimitedResponse:
        """Perform a DELETE request."""
        return await self.dispatch(RequestSpec.coerce(spec, method="DELETE"))

    async def get_identity(self) -> RateLimitedResponse:
        """
        Get the identity of the authenticated user.

        Requires auth level 2.
        """
        return await self.get(RequestSpec(url="/oauth/identity", auth_level=AuthLevel.USER))

    async def about(self) -> RateLimitedResponse:
        """
        Get info about the Discogs API and this client.

        The server's welcome document is returned with a ``client_info``
        entry holding version, user agent, auth method and auth level.
        """
        response = await self.get("")
        client_info = {
            "version": package_version(),
            "user_agent": self.config.user_agent,
            "auth_method": self.auth.method.value if self.auth else "none",
            "auth_level": int(self.auth.level) if self.auth else 0,
        }
        data = response.data
        if isinstance(data, dict):
            data = {**data, "client_info": client_info}
        return RateLimitedResponse(data=data, rate_limit=response.rate_limit)

    def database(self) -> "DatabaseAPI":
        """Database resources: artists, releases, masters, labels and search."""
        from .database import DatabaseAPI

        return DatabaseAPI(self)

    def marketplace(self) -> "MarketplaceAPI":
        """Marketplace resources: listings, orders, fees and price suggestions."""
        from .marketplace import MarketplaceAPI

        return MarketplaceAPI(self)

    def user(self) -> "UserAPI":
        """User resources: profile, inventory, collection, wantlist and lists."""
        from .user import UserAPI

        return UserAPI(self)

    def inventory(self) -> "InventoryAPI":
        """Inventory export jobs."""
        from .inventory import InventoryAPI

        return InventoryAPI(self)

    def oauth(self) -> "DiscogsOAuth":
        """
        OAuth 1.0a handshake helper using this client's consumer credentials.

        Raises:
            ValueError: If the client has no consumer key and secret
        """
        from ..auth.oauth import DiscogsOAuth

        if not self.auth or not (self.auth.consumer_key and self.auth.consumer_secret):
            raise ValueError("OAuth requires a consumer key and consumer secret")

        return DiscogsOAuth(
            self.auth.consumer_key,
            self.auth.consumer_secret,
            user_agent=self.config.user_agent,
            http_config=self.http_config,
            signer=self.signer,
        )
