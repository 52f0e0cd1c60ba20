"""Discogs marketplace inventory exports."""

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import structlog

from .models import RateLimitedResponse, RequestSpec
from ..common.string_utils import with_query

if TYPE_CHECKING:
    from .base_client import DiscogsClient

logger = structlog.get_logger(__name__)


class InventoryAPI:
    """
    Accessor for inventory export jobs.

    Example:
        >>> inventory = client.inventory()
        >>> await inventory.export_inventory()
        >>> exports = await inventory.get_exports()
        >>> latest = exports.data["items"][0]
        >>> csv = await inventory.download_export(latest["id"])
    """

    def __init__(self, client: "DiscogsClient"):
        self.client = client

    async def export_inventory(self) -> RateLimitedResponse:
        """
        Request a CSV export of the authenticated user's inventory.

        The server answers with an empty body; only the rate limit is returned.
        """
        response = await self.client.post("/inventory/export", {})
        logger.info("discogs_inventory_export_requested")
        return RateLimitedResponse(data=None, rate_limit=response.rate_limit)

    async def get_exports(self, params: Optional[Dict[str, Any]] = None) -> RateLimitedResponse:
        return await self.client.get(with_query("/inventory/export", params))

    async def get_export(self, export_id: Union[int, str]) -> RateLimitedResponse:
        return await self.client.get(f"/inventory/export/{export_id}")

    async def download_export(self, export_id: Union[int, str]) -> RateLimitedResponse:
        """Download a finished export; data is the raw CSV text."""
        return await self.client.get(
            RequestSpec(url=f"/inventory/export/{export_id}/download", json_response=False)
        )
