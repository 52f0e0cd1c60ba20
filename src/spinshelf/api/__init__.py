"""API layer for Spinshelf.

The DiscogsClient runs every request through the call queue, the request
signer and the retry controller. The resource accessors build URLs on top
of it.
"""

from .base_client import DiscogsClient
from .collection import CollectionAPI
from .database import DatabaseAPI
from .inventory import InventoryAPI
from .lists import ListsAPI
from .marketplace import MarketplaceAPI
from .models import RateLimitedResponse, RequestSpec
from .user import UserAPI
from .wantlist import WantlistAPI

__all__ = [
    "DiscogsClient",
    "CollectionAPI",
    "DatabaseAPI",
    "InventoryAPI",
    "ListsAPI",
    "MarketplaceAPI",
    "RateLimitedResponse",
    "RequestSpec",
    "UserAPI",
    "WantlistAPI",
]
