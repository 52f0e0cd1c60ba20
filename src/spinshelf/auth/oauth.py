"""Discogs OAuth 1.0a handshake: request token and access token retrieval."""

from typing import Optional
from urllib.parse import parse_qs

import httpx
import structlog
from pydantic import BaseModel

from .signer import AuthContext, AuthMethod, RequestSigner
from ..common.config import HTTPConfig, default_user_agent
from ..core.exceptions import DiscogsError

logger = structlog.get_logger(__name__)

REQUEST_TOKEN_URL = "https://api.discogs.com/oauth/request_token"
ACCESS_TOKEN_URL = "https://api.discogs.com/oauth/access_token"
AUTHORIZE_URL = "https://discogs.com/oauth/authorize"


class RequestToken(BaseModel):
    """Temporary token returned by the first step of the OAuth flow."""

    token: str
    token_secret: str
    callback_confirmed: bool
    authorize_url: str


class AccessToken(BaseModel):
    """Permanent access token returned by the last step of the OAuth flow."""

    access_token: str
    access_token_secret: str

    def to_auth(self, consumer_key: str, consumer_secret: str) -> AuthContext:
        """Build an OAuth AuthContext for a DiscogsClient."""
        return AuthContext(
            method=AuthMethod.OAUTH,
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            access_token=self.access_token,
            access_token_secret=self.access_token_secret,
        )


class DiscogsOAuth:
    """
    Runs the Discogs OAuth 1.0a flow with PLAINTEXT signatures.

    1. ``get_request_token(callback_url)`` and send the user to
       ``authorize_url``.
    2. Discogs redirects back with a verifier.
    3. ``get_access_token(token, token_secret, verifier)`` and pass
       ``AccessToken.to_auth(...)`` to a DiscogsClient.

    Example:
        >>> oauth = DiscogsOAuth("consumer_key", "consumer_secret")
        >>> request_token = await oauth.get_request_token("https://example.com/callback")
        >>> print(request_token.authorize_url)
        >>> access = await oauth.get_access_token(
        ...     request_token.token, request_token.token_secret, verifier
        ... )
        >>> client = DiscogsClient(auth=access.to_auth("consumer_key", "consumer_secret"))
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        user_agent: Optional[str] = None,
        http_config: Optional[HTTPConfig] = None,
        signer: Optional[RequestSigner] = None,
    ):
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.user_agent = user_agent or default_user_agent()
        self.http_config = http_config or HTTPConfig()
        self.signer = signer or RequestSigner()

    async def _exchange(self, method: str, url: str, authorization: str) -> dict:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Authorization": authorization,
            "User-Agent": self.user_agent,
        }
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(float(self.http_config.timeout)),
            verify=self.http_config.verify_ssl,
        ) as client:
            response = await client.request(method, url, headers=headers)

        if response.status_code != 200:
            logger.warning(
                "discogs_oauth_failed",
                url=url,
                status_code=response.status_code,
            )
            raise DiscogsError(response.status_code, response.text)

        return {key: values[0] for key, values in parse_qs(response.text).items()}

    async def get_request_token(self, callback_url: str) -> RequestToken:
        """
        Get an OAuth request token.

        Args:
            callback_url: URL Discogs redirects to after authorization

        Raises:
            DiscogsError: If Discogs rejects the consumer credentials
        """
        logger.info("discogs_oauth_requesting_token")
        params = await self._exchange(
            "GET",
            REQUEST_TOKEN_URL,
            self.signer.request_token_header(
                self.consumer_key, self.consumer_secret, callback_url
            ),
        )
        token = params.get("oauth_token", "")
        return RequestToken(
            token=token,
            token_secret=params.get("oauth_token_secret", ""),
            callback_confirmed=params.get("oauth_callback_confirmed") == "true",
            authorize_url=f"{AUTHORIZE_URL}?oauth_token={token}",
        )

    async def get_access_token(
        self, token: str, token_secret: str, verifier: str
    ) -> AccessToken:
        """
        Exchange an authorized request token for an access token.

        Args:
            token: Request token from get_request_token()
            token_secret: Request token secret
            verifier: Verification code returned by Discogs

        Raises:
            DiscogsError: If the exchange is rejected
        """
        logger.info("discogs_oauth_exchanging_token")
        params = await self._exchange(
            "POST",
            ACCESS_TOKEN_URL,
            self.signer.access_token_header(
                self.consumer_key, self.consumer_secret, token, token_secret, verifier
            ),
        )
        return AccessToken(
            access_token=params.get("oauth_token", ""),
            access_token_secret=params.get("oauth_token_secret", ""),
        )
