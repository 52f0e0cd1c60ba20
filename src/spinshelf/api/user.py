"""Discogs user resources and the per-user sub-accessors."""

from typing import TYPE_CHECKING, Any, Dict, Optional

from .collection import CollectionAPI
from .lists import ListsAPI
from .models import RateLimitedResponse
from .wantlist import WantlistAPI
from ..common.string_utils import escape, with_query

if TYPE_CHECKING:
    from .base_client import DiscogsClient


class UserAPI:
    """
    Accessor for Discogs user endpoints.

    Example:
        >>> user = client.user()
        >>> profile = await user.get_profile("rodneyfool")
        >>> wants = await user.wantlist().get_releases("rodneyfool")
    """

    def __init__(self, client: "DiscogsClient"):
        self.client = client

    async def get_profile(self, user: str) -> RateLimitedResponse:
        """Get a user's profile."""
        return await self.client.get(f"/users/{escape(user)}")

    async def edit_profile(self, user: str, data: Dict[str, Any]) -> RateLimitedResponse:
        """
        Edit a user's profile.

        Args:
            user: Username
            data: Any of name, home_page, location, profile, curr_abbr
        """
        return await self.client.post(f"/users/{escape(user)}", data)

    async def get_inventory(
        self, user: str, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        """
        Get a user's marketplace inventory.

        Args:
            user: Username
            params: status filter, pagination and sorting
        """
        return await self.client.get(with_query(f"/users/{escape(user)}/inventory", params))

    async def get_identity(self) -> RateLimitedResponse:
        """Get the identity of the authenticated user. Requires auth level 2."""
        return await self.client.get_identity()

    async def get_contributions(
        self, user: str, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        return await self.client.get(with_query(f"/users/{escape(user)}/contributions", params))

    async def get_submissions(
        self, user: str, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        return await self.client.get(with_query(f"/users/{escape(user)}/submissions", params))

    async def get_lists(
        self, user: str, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        return await self.client.get(with_query(f"/users/{escape(user)}/lists", params))

    def collection(self) -> CollectionAPI:
        return CollectionAPI(self.client)

    def wantlist(self) -> WantlistAPI:
        return WantlistAPI(self.client)

    def lists(self) -> ListsAPI:
        return ListsAPI(self.client)
