"""Structured logging for cast discovery."""

import logging

import structlog
from structlog.typing import Processor

from .config import LoggingConfig


def _renderer(log_format: str) -> Processor:
    if log_format.lower() == "console":
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer(sort_keys=True)


def configure_logging(logging_config: LoggingConfig) -> structlog.stdlib.BoundLogger:
    """Route structlog events through the stdlib root logger at the configured level.

    Discovery modules log through `structlog.get_logger(__name__)`, so calling
    this once at startup is enough. Returns the package-level logger.
    """
    logging.basicConfig(
        level=getattr(logging, logging_config.level.upper()),
        format="%(message)s",
        force=True
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _renderer(logging_config.format),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    package_logger = structlog.get_logger("cast_discovery")
    package_logger.debug("Structured logging ready", level=logging_config.level, renderer=logging_config.format)
    return package_logger
