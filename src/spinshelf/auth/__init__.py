"""Authentication: request signing and the OAuth 1.0a handshake."""

from .oauth import AccessToken, DiscogsOAuth, RequestToken
from .signer import (
    AuthContext,
    AuthLevel,
    AuthMethod,
    RequestSigner,
    SignatureMethod,
)

__all__ = [
    "AuthContext",
    "AuthLevel",
    "AuthMethod",
    "SignatureMethod",
    "RequestSigner",
    "DiscogsOAuth",
    "RequestToken",
    "AccessToken",
]
