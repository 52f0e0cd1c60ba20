"""Discogs user collection: folders, release instances, fields and value."""

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .models import RateLimitedResponse, RequestSpec
from ..auth.signer import AuthLevel
from ..common.string_utils import escape, with_query
from ..core.exceptions import AuthError

if TYPE_CHECKING:
    from .base_client import DiscogsClient

ResourceId = Union[int, str]

# Folder 0 ("All") is the only folder readable without user auth.
PUBLIC_FOLDER = 0
DEFAULT_FOLDER = 1


class CollectionAPI:
    """
    Accessor for a user's collection.

    Reading folder 0 works for anyone when the collection is public; every
    other folder, and all writes, need auth level 2.

    Example:
        >>> collection = client.user().collection()
        >>> folders = await collection.get_folders("rodneyfool")
        >>> releases = await collection.get_releases("rodneyfool", 0, {"per_page": 50})
    """

    def __init__(self, client: "DiscogsClient"):
        self.client = client

    def _folder_path(self, user: str, folder: Optional[ResourceId] = None) -> str:
        path = f"/users/{escape(user)}/collection/folders"
        if folder is not None:
            path += f"/{folder}"
        return path

    def _instance_path(
        self, user: str, folder: ResourceId, release: ResourceId, instance: ResourceId
    ) -> str:
        return f"{self._folder_path(user, folder)}/releases/{release}/instances/{instance}"

    def _check_folder_access(self, folder: ResourceId) -> None:
        if int(folder) != PUBLIC_FOLDER and not self.client.authenticated(AuthLevel.USER):
            raise AuthError()

    async def get_folders(self, user: str) -> RateLimitedResponse:
        """List a user's folders; only folder 0 is listed for anonymous callers."""
        return await self.client.get(self._folder_path(user))

    async def get_folder(self, user: str, folder: ResourceId) -> RateLimitedResponse:
        """
        Get metadata of a collection folder.

        Raises:
            AuthError: For folders other than 0 without auth level 2
        """
        self._check_folder_access(folder)
        return await self.client.get(self._folder_path(user, folder))

    async def add_folder(self, user: str, name: str) -> RateLimitedResponse:
        return await self.client.post(
            RequestSpec(url=self._folder_path(user), auth_level=AuthLevel.USER), {"name": name}
        )

    async def set_folder_name(
        self, user: str, folder: ResourceId, name: str
    ) -> RateLimitedResponse:
        return await self.client.post(
            RequestSpec(url=self._folder_path(user, folder), auth_level=AuthLevel.USER),
            {"name": name},
        )

    async def delete_folder(self, user: str, folder: ResourceId) -> RateLimitedResponse:
        """Delete a folder. Discogs refuses to delete folders that are not empty."""
        return await self.client.delete(
            RequestSpec(url=self._folder_path(user, folder), auth_level=AuthLevel.USER)
        )

    async def get_releases(
        self, user: str, folder: ResourceId, params: Optional[Dict[str, Any]] = None
    ) -> RateLimitedResponse:
        """
        List the releases in a collection folder.

        Args:
            user: Username
            folder: Folder ID (0 for all releases)
            params: Pagination and sorting (sort, sort_order)

        Raises:
            AuthError: For folders other than 0 without auth level 2
        """
        self._check_folder_access(folder)
        return await self.client.get(
            with_query(f"{self._folder_path(user, folder)}/releases", params)
        )

    async def get_release_instances(self, user: str, release: ResourceId) -> RateLimitedResponse:
        """List every instance of a release in a user's collection."""
        return await self.client.get(f"/users/{escape(user)}/collection/releases/{release}")

    async def add_release(
        self, user: str, release: ResourceId, folder: ResourceId = DEFAULT_FOLDER
    ) -> RateLimitedResponse:
        """
        Add a release to a folder (default: 1, "Uncategorized").

        Returns:
            RateLimitedResponse whose data holds instance_id and resource_url
        """
        return await self.client.post(
            RequestSpec(
                url=f"{self._folder_path(user, folder)}/releases/{release}",
                auth_level=AuthLevel.USER,
            )
        )

    async def edit_release(
        self,
        user: str,
        folder: ResourceId,
        release: ResourceId,
        instance: ResourceId,
        data: Dict[str, Any],
    ) -> RateLimitedResponse:
        """Change the rating of an instance or move it (``folder_id``)."""
        return await self.client.post(
            RequestSpec(
                url=self._instance_path(user, folder, release, instance),
                auth_level=AuthLevel.USER,
            ),
            data,
        )

    async def remove_release(
        self, user: str, folder: ResourceId, release: ResourceId, instance: ResourceId
    ) -> RateLimitedResponse:
        return await self.client.delete(
            RequestSpec(
                url=self._instance_path(user, folder, release, instance),
                auth_level=AuthLevel.USER,
            )
        )

    async def get_fields(self, user: str) -> RateLimitedResponse:
        """List the custom note fields of a collection."""
        return await self.client.get(f"/users/{escape(user)}/collection/fields")

    async def edit_instance_note(
        self,
        user: str,
        folder: ResourceId,
        release: ResourceId,
        instance: ResourceId,
        field: int,
        value: str,
    ) -> RateLimitedResponse:
        """Set the value of a custom note field on a release instance."""
        path = with_query(
            f"{self._instance_path(user, folder, release, instance)}/fields/{field}",
            {"value": value},
        )
        return await self.client.post(RequestSpec(url=path, auth_level=AuthLevel.USER))

    async def get_value(self, user: str) -> RateLimitedResponse:
        """Get the minimum, median and maximum value of a collection."""
        return await self.client.get(
            RequestSpec(url=f"/users/{escape(user)}/collection/value", auth_level=AuthLevel.USER)
        )
