"""Spinshelf package initialization."""

from pathlib import Path
from typing import Optional

import structlog

from .common.config import (
    ClientConfig,
    Config,
    HTTPConfig,
    LoggingConfig,
    QueueConfig,
    StackConfig,
)
from .common.logging_config import setup_logging
from .common.call_queue import Admission, CallQueue, QueueState
from .common.http_client import AsyncHTTPClient
from .common.rate_limit import RateLimit, parse_rate_limit
from .common.string_utils import escape, strip_variation, to_query_string
from .auth import (
    AccessToken,
    AuthContext,
    AuthLevel,
    AuthMethod,
    DiscogsOAuth,
    RequestSigner,
    RequestToken,
    SignatureMethod,
)
from .api import (
    CollectionAPI,
    DatabaseAPI,
    DiscogsClient,
    InventoryAPI,
    ListsAPI,
    MarketplaceAPI,
    RateLimitedResponse,
    RequestSpec,
    UserAPI,
    WantlistAPI,
)
from .core.exceptions import AuthError, DiscogsError, RateLimitExceededError

__version__ = "0.1.0"
__all__ = [
    "ClientConfig",
    "Config",
    "HTTPConfig",
    "LoggingConfig",
    "QueueConfig",
    "StackConfig",
    "setup_logging",
    "Admission",
    "CallQueue",
    "QueueState",
    "AsyncHTTPClient",
    "RateLimit",
    "parse_rate_limit",
    "escape",
    "strip_variation",
    "to_query_string",
    "AccessToken",
    "AuthContext",
    "AuthLevel",
    "AuthMethod",
    "DiscogsOAuth",
    "RequestSigner",
    "RequestToken",
    "SignatureMethod",
    "CollectionAPI",
    "DatabaseAPI",
    "DiscogsClient",
    "InventoryAPI",
    "ListsAPI",
    "MarketplaceAPI",
    "RateLimitedResponse",
    "RequestSpec",
    "UserAPI",
    "WantlistAPI",
    "AuthError",
    "DiscogsError",
    "RateLimitExceededError",
    "configure",
    "get_config",
    "create_client",
]

# Module-level logger (not configured yet)
logger = structlog.get_logger(__name__)

_config: Optional[Config] = None


def configure(config_path: Optional[Path] = None, config: Optional[Config] = None) -> Config:
    """
    Configure the spinshelf package.

    Call once at application startup to load the configuration and set up
    logging.

    Args:
        config_path: Path to YAML configuration file
        config: Pre-loaded Config object (takes precedence over config_path)

    Example:
        >>> import spinshelf
        >>> from pathlib import Path
        >>> spinshelf.configure(config_path=Path("config.yaml"))
    """
    global _config

    if config is not None:
        _config = config
    elif config_path is not None:
        _config = Config.from_yaml(config_path)
    else:
        _config = Config()

    setup_logging(_config.logging)

    logger.info(
        "spinshelf_configured",
        version=__version__,
        base_url=_config.client.base_url,
    )
    return _config


def get_config() -> Config:
    """
    Get current configuration, initializing with defaults if needed.

    Example:
        >>> import spinshelf
        >>> spinshelf.get_config().client.request_limit
        25
    """
    global _config
    if _config is None:
        _config = Config()
        setup_logging(_config.logging)
    return _config


def create_client(queue: Optional[CallQueue] = None) -> DiscogsClient:
    """
    Create a DiscogsClient from the current package configuration.

    Example:
        >>> async with spinshelf.create_client() as client:
        ...     about = await client.about()
    """
    return DiscogsClient.from_config(get_config(), queue=queue)
