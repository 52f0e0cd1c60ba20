"""Discogs user wantlist."""

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .models import RateLimitedResponse, RequestSpec
from ..auth.signer import AuthLevel
from ..common.string_utils import escape, with_query

if TYPE_CHECKING:
    from .base_client import DiscogsClient


class WantlistAPI:
    """Accessor for a user's wantlist. Writes require auth level 2."""

    def __init__(self, client: "DiscogsClient"):
        self.client = client

    def _want_spec(self, user: str, release: Union[int, str]) -> RequestSpec:
        return RequestSpec(url=f"/users/{escape(user)}/wants/{release}", auth_level=AuthLevel.USER)

    async def get_releases(
        self, user: str, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        return await self.client.get(with_query(f"/users/{escape(user)}/wants", params))

    async def add_release(
        self, user: str, release: Union[int, str], data: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        """
        Add a release to the wantlist.

        Args:
            user: Username
            release: Release ID
            data: Optional notes and rating (0-5)
        """
        return await self.client.put(self._want_spec(user, release), data)

    async def edit_notes(
        self, user: str, release: Union[int, str], data: Dict[str, Any]
    ) -> RateLimitedResponse:
        return await self.client.post(self._want_spec(user, release), data)

    async def remove_release(self, user: str, release: Union[int, str]) -> RateLimitedResponse:
        return await self.client.delete(self._want_spec(user, release))
