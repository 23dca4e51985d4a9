"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_NOT_FOUND_MESSAGE = "Aucune donnée générée pour le moment."


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000


class ProfileConfig(BaseModel):
    base_url: str = "https://api.linkedin.com"
    profile_path: str = "/v2/userinfo"
    # Empty token is passed through; the provider decides whether it is valid.
    token: str = ""
    timeout_s: float = 15.0


class StorageConfig(BaseModel):
    path: str = "public/portfolio-data.json"


class ScheduleConfig(BaseModel):
    interval_s: int = Field(default=3600, gt=0)
    run_on_start: bool = True


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    not_found_message: str = DEFAULT_NOT_FOUND_MESSAGE
