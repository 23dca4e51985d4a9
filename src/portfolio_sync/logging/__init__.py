"""Structured logging."""

from portfolio_sync.logging.setup import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
