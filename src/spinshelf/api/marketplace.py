"""Discogs marketplace resources: listings, orders, fees and price data."""

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import structlog

from .models import RateLimitedResponse, RequestSpec
from .user import UserAPI
from ..auth.signer import AuthLevel
from ..common.string_utils import with_query

if TYPE_CHECKING:
    from .base_client import DiscogsClient

logger = structlog.get_logger(__name__)

ResourceId = Union[int, str]

CONDITIONS = (
    "Mint (M)",
    "Near Mint (NM or M-)",
    "Very Good Plus (VG+)",
    "Very Good (VG)",
    "Good Plus (G+)",
    "Good (G)",
    "Fair (F)",
    "Poor (P)",
)


class MarketplaceAPI:
    """
    Accessor for the Discogs marketplace endpoints.

    Listing and order operations require auth level 2.

    Example:
        >>> market = client.marketplace()
        >>> fee = await market.get_fee(10)
        >>> print(fee.data["value"], fee.data["currency"])
    """

    def __init__(self, client: "DiscogsClient"):
        self.client = client
        self._user = UserAPI(client)

    async def get_inventory(
        self, user: str, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        """Get a user's marketplace inventory. Same as UserAPI.get_inventory()."""
        return await self._user.get_inventory(user, params)

    async def get_listing(
        self, listing: ResourceId, currency: Optional[str] = None
    ) -> RateLimitedResponse:
        """
        Get a marketplace listing.

        Args:
            listing: Listing ID
            currency: Currency to show prices in
        """
        params = {"curr_abbr": currency} if currency else None
        return await self.client.get(with_query(f"/marketplace/listings/{listing}", params))

    async def add_listing(self, data: Dict[str, Any]) -> RateLimitedResponse:
        """
        Create a marketplace listing.

        Args:
            data: Listing fields; release_id, condition, price and status are
                required by Discogs

        Returns:
            RateLimitedResponse whose data holds listing_id and resource_url
        """
        condition = data.get("condition")
        if condition is not None and condition not in CONDITIONS:
            logger.warning("discogs_unknown_condition", condition=condition)

        return await self.client.post(
            RequestSpec(url="/marketplace/listings", auth_level=AuthLevel.USER), data
        )

    async def edit_listing(self, listing: ResourceId, data: Dict[str, Any]) -> RateLimitedResponse:
        return await self.client.post(
            RequestSpec(url=f"/marketplace/listings/{listing}", auth_level=AuthLevel.USER), data
        )

    async def delete_listing(self, listing: ResourceId) -> RateLimitedResponse:
        return await self.client.delete(
            RequestSpec(url=f"/marketplace/listings/{listing}", auth_level=AuthLevel.USER)
        )

    async def get_orders(self, params: Optional[Dict[str, Any]] = None) -> RateLimitedResponse:
        """
        List the authenticated seller's orders.

        Args:
            params: Filters (status, created_after, created_before, archived),
                pagination and sorting
        """
        return await self.client.get(
            RequestSpec(url=with_query("/marketplace/orders", params), auth_level=AuthLevel.USER)
        )

    async def get_order(self, order: ResourceId) -> RateLimitedResponse:
        return await self.client.get(
            RequestSpec(url=f"/marketplace/orders/{order}", auth_level=AuthLevel.USER)
        )

    async def edit_order(self, order: ResourceId, data: Dict[str, Any]) -> RateLimitedResponse:
        """Change the status or shipping cost of an order."""
        return await self.client.post(
            RequestSpec(url=f"/marketplace/orders/{order}", auth_level=AuthLevel.USER), data
        )

    async def get_order_messages(
        self, order: ResourceId, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        return await self.client.get(
            RequestSpec(
                url=with_query(f"/marketplace/orders/{order}/messages", params),
                auth_level=AuthLevel.USER,
            )
        )

    async def add_order_message(
        self, order: ResourceId, data: Dict[str, Any]
    ) -> RateLimitedResponse:
        return await self.client.post(
            RequestSpec(url=f"/marketplace/orders/{order}/messages", auth_level=AuthLevel.USER),
            data,
        )

    async def get_fee(self, price: float, currency: Optional[str] = None) -> RateLimitedResponse:
        """
        Get the marketplace fee for a price.

        Args:
            price: Item price, sent with two decimals
            currency: Currency of the price (default: USD on the server side)

        Example:
            >>> fee = await market.get_fee(10, "EUR")  # /marketplace/fee/10.00/EUR
        """
        path = f"/marketplace/fee/{price:.2f}"
        if currency:
            path += f"/{currency}"
        return await self.client.get(path)

    async def get_price_suggestions(self, release: ResourceId) -> RateLimitedResponse:
        """Get suggested prices per condition for a release. Requires auth level 2."""
        return await self.client.get(
            RequestSpec(url=f"/marketplace/price_suggestions/{release}", auth_level=AuthLevel.USER)
        )

    async def get_release_stats(
        self, release: ResourceId, currency: Optional[str] = None
    ) -> RateLimitedResponse:
        """Get the lowest price and number for sale of a release."""
        params = {"curr_abbr": currency} if currency else None
        return await self.client.get(with_query(f"/marketplace/stats/{release}", params))
