"""
Frontend configuration.

Loads frontend-specific environment variables only.
Supabase credentials live in ``app.config``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Frontend application settings.

    Environment variables must be prefixed with:
        EVENTBELL_

    Example:
        EVENTBELL_PORT=8080
    """

    TITLE: str = "Eventbell"
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=8080, ge=1, le=65535)

    # Browsers whose Supabase clients are kept open at once
    MAX_BROWSER_SESSIONS: int = Field(default=500, ge=1)

    # Signs NiceGUI browser storage; override outside development
    STORAGE_SECRET: str = Field(default="dev-secret", min_length=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EVENTBELL_",
        extra="ignore",
    )


settings = Settings()
