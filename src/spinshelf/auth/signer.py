"""Authorization header construction for Discogs requests."""

import base64
import hashlib
import hmac
import secrets
import time
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, model_validator


class AuthMethod(str, Enum):
    """How the client authenticates."""

    DISCOGS = "discogs"
    OAUTH = "oauth"


class AuthLevel(IntEnum):
    """How strongly a client is authenticated."""

    NONE = 0
    CONSUMER = 1
    USER = 2


class SignatureMethod(str, Enum):
    """OAuth 1.0a signature methods supported by Discogs."""

    PLAINTEXT = "PLAINTEXT"
    HMAC_SHA1 = "HMAC-SHA1"


class AuthContext(BaseModel):
    """
    Credentials and auth level of a client.

    The level is derived from the credentials when not given: a user token
    or an OAuth access token pair means level 2, a consumer key and secret
    means level 1.

    Example:
        >>> AuthContext(user_token="abc").level
        <AuthLevel.USER: 2>
        >>> AuthContext(consumer_key="k", consumer_secret="s").level
        <AuthLevel.CONSUMER: 1>
    """

    model_config = ConfigDict(frozen=True)

    method: AuthMethod = AuthMethod.DISCOGS
    level: AuthLevel = AuthLevel.NONE
    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = None
    user_token: Optional[str] = None
    access_token: Optional[str] = None
    access_token_secret: Optional[str] = None
    signature_method: SignatureMethod = SignatureMethod.PLAINTEXT

    @model_validator(mode="before")
    @classmethod
    def derive_level(cls, data: Any) -> Any:
        """Fill in the auth level from the credentials present."""
        if not isinstance(data, dict) or data.get("level") is not None:
            return data

        method = getattr(data.get("method"), "value", data.get("method"))
        if method == AuthMethod.OAUTH.value:
            has_user = bool(data.get("access_token") and data.get("access_token_secret"))
        else:
            has_user = bool(data.get("user_token"))

        if has_user:
            level = AuthLevel.USER
        elif data.get("consumer_key") and data.get("consumer_secret"):
            level = AuthLevel.CONSUMER
        else:
            level = AuthLevel.NONE
        return {**data, "level": level}


def percent_encode(value: str) -> str:
    """RFC 3986 percent-encoding as required by OAuth 1.0a."""
    return quote(value, safe="-._~")


def _format_oauth_header(params: List[Tuple[str, str]]) -> str:
    return "OAuth " + ", ".join(f'{key}="{value}"' for key, value in params)


class RequestSigner:
    """
    Build Authorization headers for API requests.

    The clock and nonce source are injectable so headers can be reproduced
    in tests.

    Example:
        >>> signer = RequestSigner(clock=lambda: 1700000000, nonce_factory=lambda: "n0nce")
        >>> signer.authorization_header("GET", "https://api.discogs.com/oauth/identity",
        ...                             AuthContext(user_token="abc"))
        'Discogs token=abc'
    """

    OAUTH_VERSION = "1.0"

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        nonce_factory: Callable[[], str] = lambda: secrets.token_hex(32),
    ):
        self._clock = clock
        self._nonce_factory = nonce_factory

    def _timestamp(self) -> str:
        return str(int(self._clock()))

    def authorization_header(
        self, method: str, url: str, auth: Optional[AuthContext]
    ) -> Optional[str]:
        """
        Return the Authorization header value for a request, if any.

        No header is produced without a consumer key or user token.
        """
        if auth is None or not (auth.consumer_key or auth.user_token):
            return None

        if auth.method == AuthMethod.OAUTH:
            return self._oauth_header(method, url, auth)

        if auth.user_token:
            return f"Discogs token={auth.user_token}"
        return f"Discogs key={auth.consumer_key}, secret={auth.consumer_secret}"

    def _oauth_header(self, method: str, url: str, auth: AuthContext) -> str:
        consumer_key = auth.consumer_key or ""
        token = auth.access_token or ""
        nonce = self._nonce_factory()
        timestamp = self._timestamp()
        signature_method = auth.signature_method.value

        if auth.signature_method == SignatureMethod.HMAC_SHA1:
            signed_params = [
                ("oauth_consumer_key", consumer_key),
                ("oauth_nonce", nonce),
                ("oauth_token", token),
                ("oauth_signature_method", signature_method),
                ("oauth_timestamp", timestamp),
                ("oauth_version", self.OAUTH_VERSION),
            ]
            signature = percent_encode(
                hmac_sha1_signature(
                    method,
                    url,
                    signed_params,
                    auth.consumer_secret or "",
                    auth.access_token_secret or "",
                )
            )
        else:
            signature = plaintext_signature(
                auth.consumer_secret or "", auth.access_token_secret or ""
            )

        return _format_oauth_header(
            [
                ("oauth_consumer_key", consumer_key),
                ("oauth_nonce", nonce),
                ("oauth_token", token),
                ("oauth_signature", signature),
                ("oauth_signature_method", signature_method),
                ("oauth_timestamp", timestamp),
                ("oauth_version", self.OAUTH_VERSION),
            ]
        )

    def request_token_header(
        self, consumer_key: str, consumer_secret: str, callback_url: str
    ) -> str:
        """Authorization header for the request-token step of the OAuth flow."""
        return _format_oauth_header(
            [
                ("oauth_consumer_key", consumer_key),
                ("oauth_nonce", self._nonce_factory()),
                ("oauth_signature", plaintext_signature(consumer_secret, "")),
                ("oauth_signature_method", SignatureMethod.PLAINTEXT.value),
                ("oauth_timestamp", self._timestamp()),
                ("oauth_callback", percent_encode(callback_url)),
            ]
        )

    def access_token_header(
        self,
        consumer_key: str,
        consumer_secret: str,
        token: str,
        token_secret: str,
        verifier: str,
    ) -> str:
        """Authorization header for the access-token step of the OAuth flow."""
        return _format_oauth_header(
            [
                ("oauth_consumer_key", consumer_key),
                ("oauth_nonce", self._nonce_factory()),
                ("oauth_token", token),
                ("oauth_signature", plaintext_signature(consumer_secret, token_secret)),
                ("oauth_signature_method", SignatureMethod.PLAINTEXT.value),
                ("oauth_timestamp", self._timestamp()),
                ("oauth_verifier", verifier),
            ]
        )


def plaintext_signature(consumer_secret: str, token_secret: str) -> str:
    """PLAINTEXT signature: encoded consumer secret and token secret joined by ``&``."""
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"


def signature_base_string(
    method: str, url: str, oauth_params: List[Tuple[str, str]]
) -> str:
    """
    RFC 5849 signature base string.

    Query parameters of ``url`` are merged with the OAuth parameters, encoded
    and sorted; the URL is normalized to scheme, host, port and path.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    netloc = parts.hostname.lower() if parts.hostname else ""
    if parts.port and not (
        (scheme == "https" and parts.port == 443) or (scheme == "http" and parts.port == 80)
    ):
        netloc = f"{netloc}:{parts.port}"
    base_url = urlunsplit((scheme, netloc, parts.path or "/", "", ""))

    params: List[Tuple[str, str]] = parse_qsl(parts.query, keep_blank_values=True)
    params.extend(oauth_params)
    encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in params)
    normalized = "&".join(f"{k}={v}" for k, v in encoded)

    return "&".join(
        [method.upper(), percent_encode(base_url), percent_encode(normalized)]
    )


def hmac_sha1_signature(
    method: str,
    url: str,
    oauth_params: List[Tuple[str, str]],
    consumer_secret: str,
    token_secret: str,
) -> str:
    """HMAC-SHA1 signature over the signature base string, base64 encoded."""
    key = plaintext_signature(consumer_secret, token_secret).encode("utf-8")
    base = signature_base_string(method, url, oauth_params).encode("utf-8")
    digest = hmac.new(key, base, hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def auth_from_mapping(values: Dict[str, str]) -> AuthContext:
    """Build an AuthContext from a plain mapping such as the ``auth`` config section."""
    return AuthContext(**{key: value for key, value in values.items() if value})
