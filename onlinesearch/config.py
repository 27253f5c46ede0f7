"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    debounce_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Quiescence window a query must survive before it is processed.",
    )
    processing_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Simulated lookup latency applied to non-blank queries.",
    )
    keep_alive_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Grace window the pipeline survives after the last results subscriber leaves.",
    )
    sharing: Literal["while_subscribed", "eager"] = "while_subscribed"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "json"


@lru_cache
def get_settings() -> SearchSettings:
    """Return cached settings instance."""

    return SearchSettings()


__all__ = ["SearchSettings", "get_settings"]
