"""Request and response models for the Discogs client."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..auth.signer import AuthLevel
from ..common.rate_limit import RateLimit

HTTPMethod = Literal["GET", "POST", "PUT", "DELETE"]


class RequestSpec(BaseModel):
    """
    A single API request as issued by the resource accessors.

    Attributes:
        url: Path relative to the API root, or an absolute URL
        method: HTTP method
        data: JSON-serializable body for POST/PUT requests (object, array, ...)
        auth_level: Minimum auth level the request needs
        queue: Send the request through the call queue
        json_response: Decode the response body as JSON
    """

    url: str
    method: HTTPMethod = "GET"
    data: Any = None
    auth_level: AuthLevel = AuthLevel.NONE
    queue: bool = True
    json_response: bool = Field(default=True, alias="json")

    model_config = {"populate_by_name": True}

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def coerce(cls, spec: "RequestSpec | str", **overrides: Any) -> "RequestSpec":
        """Accept a url string or a RequestSpec, applying ``overrides``."""
        if isinstance(spec, str):
            return cls(url=spec, **overrides)
        if overrides:
            return spec.model_copy(update=overrides)
        return spec


class RateLimitedResponse(BaseModel):
    """Response data together with the rate-limit snapshot it arrived with."""

    data: Any = None
    rate_limit: Optional[RateLimit] = None
