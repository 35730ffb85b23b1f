"""Shared utilities (structured logging)."""

from snoots.utils.logger import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
