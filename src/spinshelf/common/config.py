"""Configuration models using Pydantic for validation."""

from importlib.metadata import PackageNotFoundError, version as get_version
from pathlib import Path
from typing import Optional, Dict, List, Any

import yaml
from pydantic import BaseModel, Field, field_validator
import structlog

logger = structlog.get_logger(__name__)

HOMEPAGE = "https://github.com/spinshelf/spinshelf"


def package_version() -> str:
    """Return the installed spinshelf version, or ``dev`` when running from a checkout."""
    try:
        return get_version("spinshelf")
    except PackageNotFoundError:
        return "dev"


def default_user_agent() -> str:
    """User-Agent sent when the caller does not provide one (required by Discogs)."""
    return f"spinshelf/{package_version()} +{HOMEPAGE}"


class ClientConfig(BaseModel):
    """Configuration for a DiscogsClient: endpoint, media type, call budgets and backoff."""

    host: str = Field(
        default="api.discogs.com",
        min_length=1,
        description="API host name",
    )
    port: int = Field(
        default=443,
        ge=1,
        le=65535,
        description="API port (https)",
    )
    user_agent: str = Field(
        default_factory=default_user_agent,
        min_length=1,
        description="User-Agent header value",
    )
    api_version: str = Field(
        default="v2",
        description="API version tag used in the Accept header",
    )
    output_format: str = Field(
        default="discogs",
        description="Text output format: discogs, plaintext or html",
    )
    request_limit: int = Field(
        default=25,
        ge=1,
        description="Maximum requests per interval when unauthenticated",
    )
    request_limit_auth: int = Field(
        default=60,
        ge=1,
        description="Maximum requests per interval when authenticated",
    )
    request_limit_interval: int = Field(
        default=60000,
        ge=1,
        description="Request limit interval in milliseconds",
    )
    exponential_backoff_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Maximum number of retries after a 429 response",
    )
    exponential_backoff_interval_ms: int = Field(
        default=2000,
        ge=0,
        description="Base backoff interval in milliseconds",
    )
    exponential_backoff_rate: float = Field(
        default=2.7,
        ge=1.0,
        le=10.0,
        description="Multiplier applied to the backoff interval per retry",
    )

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format."""
        valid_formats = ["discogs", "plaintext", "html"]
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(
                f"Invalid output format: {v}. Must be one of {valid_formats}"
            )
        return v_lower

    @property
    def base_url(self) -> str:
        """Base URL for requests; the port is omitted when it is the https default."""
        if self.port == 443:
            return f"https://{self.host}"
        return f"https://{self.host}:{self.port}"

    @property
    def accept_header(self) -> str:
        return f"application/vnd.discogs.{self.api_version}.{self.output_format}+json"


class QueueConfig(BaseModel):
    """Configuration for the call queue."""

    max_stack: int = Field(
        default=20,
        ge=0,
        description="Maximum number of calls waiting in the stack",
    )
    max_calls: int = Field(
        default=60,
        ge=1,
        description="Maximum calls admitted per interval",
    )
    interval: int = Field(
        default=60000,
        ge=1,
        description="Window length in milliseconds",
    )


class StackConfig(BaseModel):
    """
    Call queue settings for clients built from the root Config.

    A client derives the queue's call budget and window from its own
    ``request_limit*`` settings, so only the stack size is configurable
    here. Unknown keys such as ``max_calls`` are rejected.
    """

    model_config = {"extra": "forbid"}

    max_stack: int = Field(
        default=20,
        ge=0,
        description="Maximum number of calls waiting in the stack",
    )


class HTTPConfig(BaseModel):
    """Configuration for the HTTP transport."""

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Request timeout in seconds",
    )
    max_redirects: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Maximum number of redirects to follow",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    max_connections: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of connections in the pool",
    )
    max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Maximum number of keep-alive connections",
    )


class FileLoggingConfig(BaseModel):
    """Configuration for file-based logging."""

    path: str = Field(
        default="logs/spinshelf.log",
        description="Path to log file",
    )
    max_bytes: int = Field(
        default=10485760,  # 10MB
        ge=1024,
        description="Maximum size of log file before rotation",
    )
    backup_count: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Number of backup log files to keep",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    format: str = Field(
        default="json",
        description="Log format: json or text",
    )
    handlers: List[str] = Field(
        default_factory=lambda: ["console"],
        description="Enabled log handlers: console, file",
    )
    file: Optional[FileLoggingConfig] = Field(
        default=None,
        description="File logging configuration (optional)",
    )
    third_party: Dict[str, str] = Field(
        default_factory=dict,
        description="Log levels for third-party libraries",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of {valid_levels}"
            )
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(
                f"Invalid format: {v}. Must be one of {valid_formats}"
            )
        return v_lower

    @field_validator("handlers")
    @classmethod
    def validate_handlers(cls, v: List[str]) -> List[str]:
        """Validate handlers."""
        valid_handlers = ["console", "file"]
        for handler in v:
            if handler not in valid_handlers:
                raise ValueError(
                    f"Invalid handler: {handler}. Must be one of {valid_handlers}"
                )
        return v


class Config(BaseModel):
    """Main configuration class for spinshelf."""

    client: ClientConfig = Field(
        default_factory=ClientConfig,
        description="Discogs client configuration",
    )
    queue: StackConfig = Field(
        default_factory=StackConfig,
        description="Call queue configuration for clients built from this config",
    )
    http: HTTPConfig = Field(
        default_factory=HTTPConfig,
        description="HTTP transport configuration",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )
    auth: Optional[Dict[str, str]] = Field(
        default=None,
        description="Authentication settings (user_token, consumer_key, consumer_secret, ...)",
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML is invalid
            pydantic.ValidationError: If config values are invalid

        Example:
            >>> config = Config.from_yaml(Path("config.yaml"))
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        logger.debug("config_loaded", path=str(path))
        return cls(**(data or {}))

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "Config":
        """
        Load configuration from a YAML string.

        Example:
            >>> config = Config.from_yaml_string("client:\\n  request_limit: 10")
        """
        data = yaml.safe_load(yaml_string)
        return cls(**(data or {}))

    def to_yaml(self, path: Path, exclude_none: bool = True) -> None:
        """
        Save configuration to a YAML file, creating parent directories as needed.

        Args:
            path: Destination file
            exclude_none: Omit fields whose value is None
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data: Dict[str, Any] = self.model_dump(mode="json", exclude_none=exclude_none)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        logger.debug("config_saved", path=str(path))
