"""Structured logging for spinshelf, built on structlog and stdlib logging."""

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, List

import structlog

from .config import LoggingConfig

# Request-level chatter from the HTTP stack is noise next to our own
# dispatch/retry events unless asked for.
THIRD_PARTY_LEVELS: Dict[str, str] = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "tenacity": "INFO",
}


def _processors(fmt: str) -> List[Any]:
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def _build_handlers(config: LoggingConfig, level: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    if "console" in config.handlers:
        handlers.append(logging.StreamHandler())

    if "file" in config.handlers and config.file:
        log_path = Path(config.file.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=log_path,
                maxBytes=config.file.max_bytes,
                backupCount=config.file.backup_count,
                encoding="utf-8",
            )
        )

    # structlog has already rendered the event by the time it reaches a handler
    formatter = logging.Formatter("%(message)s")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: LoggingConfig) -> None:
    """
    Send structlog events through stdlib logging handlers.

    Client events such as ``discogs_request_admitted``, ``call_queue_stacked``
    and ``discogs_rate_limited_retry`` are rendered as JSON or console text
    and written to the console and/or a rotating log file. httpx, httpcore
    and tenacity get their own levels so their records stay quiet by default.

    Args:
        config: LoggingConfig with level, format, handlers and per-library levels

    Example:
        >>> from spinshelf.common.config import LoggingConfig
        >>> setup_logging(LoggingConfig(level="DEBUG", format="text"))
    """
    level = getattr(logging, config.level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    for handler in _build_handlers(config, level):
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for library, library_level in {**THIRD_PARTY_LEVELS, **config.third_party}.items():
        logging.getLogger(library).setLevel(library_level.upper())

    structlog.configure(
        processors=_processors(config.format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
