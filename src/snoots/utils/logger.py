"""
Structured logging configuration using structlog.

Every Client and Gateway receives its own bound logger so that log lines can
be traced back to the client instance that produced them.
"""
import logging
import os
import sys
from typing import Any

import structlog


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structured logging with structlog.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Sets up:
        - JSON output format for production
        - Console output with colors for development
        - Context processors for timestamps and metadata
        - Integration with standard library logging
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    is_dev = os.getenv("ENVIRONMENT", "production") == "development"

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if is_dev:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__, **context: Any) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)
        **context: Values bound to every event logged through this logger

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__, gateway="OauthGateway")
        >>> logger.debug("request_sent", method="GET", path="r/python/hot")
    """
    logger = structlog.get_logger(name)
    if context:
        logger = logger.bind(**context)
    return logger
