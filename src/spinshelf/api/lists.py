"""Discogs user lists."""

from typing import TYPE_CHECKING, Union

from .models import RateLimitedResponse
from ..common.string_utils import escape

if TYPE_CHECKING:
    from .base_client import DiscogsClient


class ListsAPI:
    def __init__(self, client: "DiscogsClient"):
        self.client = client

    async def get_items(self, list_id: Union[int, str]) -> RateLimitedResponse:
        """Get the items of a list."""
        return await self.client.get(f"/lists/{escape(list_id)}")
