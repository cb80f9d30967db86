"""Configuration schema: Pydantic models for devdash config files."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PATH = [
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/usr/bin",
    "/Applications/Docker.app/Contents/Resources/bin",
]

DEFAULT_IP_INFO_URL = "https://ipinfo.io/json"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Optional[str] = None
    format: Optional[Literal["kv", "json", "pretty"]] = None
    console: Optional[bool] = None
    file: Optional[bool] = None
    dev_file: Optional[bool] = Field(None, alias="devFile")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class PollingConfig(BaseModel):
    """Cadences and per-invocation timeouts, in seconds."""
    interval: float = 60.0
    now_playing_interval: float = Field(2.0, alias="nowPlayingInterval")
    command_timeout: float = Field(10.0, alias="commandTimeout")
    http_timeout: float = Field(5.0, alias="httpTimeout")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("interval", "now_playing_interval", "command_timeout", "http_timeout")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value


class DockerConfig(BaseModel):
    """Docker engine start behaviour."""
    engine_start_delay: float = Field(3.0, alias="engineStartDelay")
    engine_start_attempts: int = Field(5, alias="engineStartAttempts", ge=1)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class Config(BaseModel):
    """Main configuration schema."""
    schema_: Optional[str] = Field(None, alias="$schema")
    logging: Optional[LoggingConfig] = None
    polling: PollingConfig = Field(default_factory=PollingConfig)
    docker: DockerConfig = Field(default_factory=DockerConfig)
    path: List[str] = Field(default_factory=lambda: list(DEFAULT_PATH))
    ip_info_url: str = Field(DEFAULT_IP_INFO_URL, alias="ipInfoUrl")
    optimistic_updates: bool = Field(True, alias="optimisticUpdates")
    title_mode: Literal["isp", "audio", "playing"] = Field("isp", alias="titleMode")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
