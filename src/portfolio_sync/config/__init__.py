"""Configuration system."""

from portfolio_sync.config.loader import load_config
from portfolio_sync.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
