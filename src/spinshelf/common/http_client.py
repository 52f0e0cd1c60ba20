"""Async HTTP transport for the Discogs API using httpx."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
import structlog

from .config import HTTPConfig
from .rate_limit import RateLimit, parse_rate_limit
from ..core.exceptions import DiscogsError

logger = structlog.get_logger(__name__)


@dataclass
class TransportResponse:
    """Decoded response of a single HTTP call."""

    status_code: int
    headers: httpx.Headers
    data: Any
    rate_limit: Optional[RateLimit] = None


class AsyncHTTPClient:
    """
    Async HTTP transport with connection pooling.

    The transport performs exactly one network call per send(): it neither
    retries nor throttles. Those concerns live in DiscogsClient and
    CallQueue.

    Features:
    - Connection pooling with httpx
    - JSON request bodies and JSON response decoding
    - Error mapping for status codes above 399
    - Structured logging for observability

    Example:
        >>> import asyncio
        >>> from spinshelf.common.config import HTTPConfig
        >>>
        >>> async def main():
        ...     async with AsyncHTTPClient(HTTPConfig()) as transport:
        ...         response = await transport.send(
        ...             "GET", "https://api.discogs.com/releases/1", headers={}
        ...         )
        ...         print(response.data["title"])
        >>>
        >>> asyncio.run(main())
    """

    def __init__(self, config: HTTPConfig, base_url: str = ""):
        """
        Initialize the async HTTP transport.

        Args:
            config: HTTPConfig object with client settings
            base_url: Base URL for relative request URLs (optional)
        """
        self.config = config
        self.base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None
        self.logger = logger.bind(component="http_client")

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Enter async context manager."""
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(float(self.config.timeout)),
            limits=limits,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
            verify=self.config.verify_ssl,
        )

        self.logger.info(
            "http_client_initialized",
            base_url=self.base_url,
            timeout=self.config.timeout,
            max_connections=self.config.max_connections,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self.logger.info("http_client_closed")

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Any] = None,
        expect_json: bool = True,
    ) -> TransportResponse:
        """
        Perform one HTTP request and decode the response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: Absolute URL, or a path relative to base_url
            headers: Request headers
            body: JSON-serializable request body (optional)
            expect_json: Decode the body as JSON; otherwise return the raw text

        Returns:
            TransportResponse with status, headers, decoded data and rate limit

        Raises:
            DiscogsError: If the server responds with a status code above 399
            httpx.TransportError: On connection or network failures
            RuntimeError: If used outside the async context manager
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        request_headers = dict(headers)
        content: Optional[bytes] = None
        if body is not None:
            content = json.dumps(body).encode("utf-8")
            request_headers["Content-Type"] = "application/json"

        self.logger.debug("http_request", method=method, url=str(url))
        response = await self._client.request(
            method, url, headers=request_headers, content=content
        )

        rate_limit = parse_rate_limit(response.headers)
        data = self._decode(response, expect_json)

        if response.status_code > 399:
            # Error bodies are JSON even when the caller asked for raw text
            error_body = data if expect_json else self._decode(response, True)
            message = ""
            if isinstance(error_body, dict):
                message = str(error_body.get("message") or "")
            self.logger.warning(
                "http_error_status",
                method=method,
                url=str(url),
                status_code=response.status_code,
                message=message,
            )
            raise DiscogsError(response.status_code, message, rate_limit=rate_limit)

        self.logger.debug(
            "http_response",
            method=method,
            url=str(url),
            status_code=response.status_code,
        )
        return TransportResponse(
            status_code=response.status_code,
            headers=response.headers,
            data=data,
            rate_limit=rate_limit,
        )

    def _decode(self, response: httpx.Response, expect_json: bool) -> Any:
        if not expect_json:
            return response.text
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            self.logger.debug(
                "http_response_not_json",
                status_code=response.status_code,
                content_type=response.headers.get("Content-Type"),
            )
            return None
