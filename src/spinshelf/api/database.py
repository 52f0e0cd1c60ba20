"""Discogs database resources: artists, releases, masters, labels and search."""

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import structlog

from .models import RateLimitedResponse, RequestSpec
from ..auth.signer import AuthLevel
from ..common.string_utils import escape, with_query

if TYPE_CHECKING:
    from .base_client import DiscogsClient

logger = structlog.get_logger(__name__)

ResourceId = Union[int, str]


class DatabaseAPI:
    """
    Accessor for the Discogs database endpoints.

    Example:
        >>> db = client.database()
        >>> master = await db.get_master(13814)
        >>> print(master.data["title"])
        >>> results = await db.search(query="nevermind", type="master")
    """

    def __init__(self, client: "DiscogsClient"):
        self.client = client

    async def get_artist(self, artist: ResourceId) -> RateLimitedResponse:
        """
        Get an artist.

        Args:
            artist: Discogs artist ID

        Returns:
            RateLimitedResponse whose data holds name, profile, images,
            members, urls and releases_url
        """
        return await self.client.get(f"/artists/{artist}")

    async def get_artist_releases(
        self, artist: ResourceId, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        """
        Get the releases and masters of an artist.

        Args:
            artist: Discogs artist ID
            params: Pagination and sorting (page, per_page, sort, sort_order)

        Example:
            >>> releases = await db.get_artist_releases(125246, {"sort": "year"})
            >>> for release in releases.data["releases"]:
            ...     print(f"{release['title']} ({release['year']})")
        """
        return await self.client.get(with_query(f"/artists/{artist}/releases", params))

    async def get_release(
        self, release: ResourceId, currency: Optional[str] = None
    ) -> RateLimitedResponse:
        """
        Get a release.

        Args:
            release: Discogs release ID
            currency: Currency for marketplace data (e.g. "EUR"); defaults to
                the authenticated user's currency
        """
        params = {"curr_abbr": currency} if currency else None
        return await self.client.get(with_query(f"/releases/{release}", params))

    async def get_release_rating(self, release: ResourceId, user: str) -> RateLimitedResponse:
        """Get the rating a user gave a release."""
        return await self.client.get(f"/releases/{release}/rating/{escape(user)}")

    async def set_release_rating(
        self, release: ResourceId, user: str, rating: Optional[int]
    ) -> RateLimitedResponse:
        """
        Set, or with ``rating=None`` remove, a user's release rating.

        Ratings above 5 are capped at 5. Requires auth level 2.
        """
        url = f"/releases/{release}/rating/{escape(user)}"
        if rating is None:
            return await self.client.delete(RequestSpec(url=url, auth_level=AuthLevel.USER))
        return await self.client.put(
            RequestSpec(url=url, auth_level=AuthLevel.USER),
            {"rating": min(rating, 5)},
        )

    async def get_release_community_rating(self, release: ResourceId) -> RateLimitedResponse:
        """Get the average community rating of a release."""
        return await self.client.get(f"/releases/{release}/rating")

    async def get_release_stats(self, release: ResourceId) -> RateLimitedResponse:
        """Get have/want counts of a release."""
        return await self.client.get(f"/releases/{release}/stats")

    async def get_master(self, master: ResourceId) -> RateLimitedResponse:
        """
        Get a master release.

        Returns:
            RateLimitedResponse whose data holds title, artists, year, genres,
            styles, tracklist, main_release and versions_url
        """
        return await self.client.get(f"/masters/{master}")

    async def get_master_versions(
        self, master: ResourceId, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        """
        Get the versions of a master release.

        Args:
            master: Discogs master ID
            params: Pagination, filters (format, label, released, country)
                and sorting
        """
        return await self.client.get(with_query(f"/masters/{master}/versions", params))

    async def get_label(self, label: ResourceId) -> RateLimitedResponse:
        """Get a label."""
        return await self.client.get(f"/labels/{label}")

    async def get_label_releases(
        self, label: ResourceId, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        """Get the releases of a label, paginated."""
        return await self.client.get(with_query(f"/labels/{label}/releases", params))

    async def search(self, query: Optional[str] = None, **params: Any) -> RateLimitedResponse:
        """
        Search the database.

        Requires auth level 1 (consumer key or better).

        Args:
            query: Free text query, sent as ``q``
            **params: Search fields (type, title, artist, label, genre, year,
                format, catno, barcode, track, ...) and pagination

        Example:
            >>> results = await db.search(query="nirvana", type="artist", per_page=5)
        """
        args: Dict[str, Any] = {}
        if query:
            args["q"] = query
        args.update(params)

        logger.info("discogs_search", query=query, fields=sorted(params))
        return await self.client.get(
            RequestSpec(url=with_query("/database/search", args), auth_level=AuthLevel.CONSUMER)
        )
