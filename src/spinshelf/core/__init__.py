"""Core exceptions shared across the client."""

from .exceptions import AuthError, DiscogsError, RateLimitExceededError

__all__ = [
    "DiscogsError",
    "AuthError",
    "RateLimitExceededError",
]
