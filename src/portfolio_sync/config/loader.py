"""Config loader — reads YAML, applies PORTFOLIO_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from portfolio_sync.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "PORTFOLIO_PORT": ("server", "port"),
    "PORTFOLIO_PROFILE_TOKEN": ("profile", "token"),
    "PORTFOLIO_PROFILE_URL": ("profile", "base_url"),
    "PORTFOLIO_STORAGE_PATH": ("storage", "path"),
    "PORTFOLIO_LOG_LEVEL": ("logging", "level"),
    "PORTFOLIO_LOG_FORMAT": ("logging", "format"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        PORTFOLIO_PORT           -> server.port
        PORTFOLIO_PROFILE_TOKEN  -> profile.token
        PORTFOLIO_PROFILE_URL    -> profile.base_url
        PORTFOLIO_STORAGE_PATH   -> storage.path
        PORTFOLIO_LOG_LEVEL      -> logging.level
        PORTFOLIO_LOG_FORMAT     -> logging.format

    ``PORTFOLIO_PROFILE_TOKEN`` is applied even when set to an empty string.
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
    # A section holding only comments loads as None.
    data = {k: v for k, v in data.items() if v is not None}

    for var, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value is None:
            continue
        if not value and var != "PORTFOLIO_PROFILE_TOKEN":
            continue
        if not isinstance(data.get(section), dict):
            data[section] = {}
        data[section][key] = value

    return AppConfig.model_validate(data)
