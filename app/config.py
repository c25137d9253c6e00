"""
Service configuration.

Centralized environment-based settings using Pydantic v2.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the Supabase-backed service layer.

    Environment variables must be prefixed with:
        EVENTBELL_

    Example:
        EVENTBELL_SUPABASE_URL=https://xyzcompany.supabase.co
    """

    # --------------------
    # Supabase
    # --------------------
    SUPABASE_URL: str = Field(..., min_length=1)
    SUPABASE_KEY: str = Field(..., min_length=1)

    # --------------------
    # Settings records
    # --------------------
    USERS_TABLE: str = Field(
        default="users",
        description="Table holding one settings record per user",
    )
    API_KEY_BYTES: int = Field(
        default=32,
        ge=16,
        description="Random bytes drawn for each generated API key",
    )

    # --------------------
    # Usage instructions
    # --------------------
    EVENTS_API_URL: str = Field(
        default="https://api.eventbell.dev/v1/events",
        description="Endpoint shown in the API usage snippets",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EVENTBELL_",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
