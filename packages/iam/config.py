"""Matcher configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatcherSettings(BaseSettings):
    """Pattern matcher settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="IAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Longest expanded pattern alternative accepted by the compiler
    max_pattern_length: int = Field(default=1024 * 64, gt=0)

    # Compiled patterns kept in memory (0 disables the cache)
    pattern_cache_size: int = Field(default=1024, ge=0)


@lru_cache
def get_settings() -> MatcherSettings:
    """Get the matcher settings singleton."""
    return MatcherSettings()
