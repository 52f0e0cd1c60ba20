"""Exceptions raised by the Discogs client."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..common.rate_limit import RateLimit


class DiscogsError(Exception):
    """
    Base exception for Discogs API errors.

    Also raised for every server response with a status code above 399,
    carrying the status code and the ``message`` field of the response body.
    """

    def __init__(
        self,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
        rate_limit: Optional["RateLimit"] = None,
    ):
        self.status_code = status_code or 404
        self.message = message or "Unknown error."
        self.rate_limit = rate_limit
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.status_code} {self.message}"


class AuthError(DiscogsError):
    """Raised when an operation needs a higher auth level than the client holds."""

    def __init__(self) -> None:
        super().__init__(401, "You must authenticate to access this resource.")


class RateLimitExceededError(DiscogsError):
    """Raised when the local call queue is full and cannot accept another call."""

    def __init__(self, message: str = "Too many requests"):
        super().__init__(429, message)
        self.remaining = 0
