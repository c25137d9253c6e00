"""
Supabase client factory.

Builds the Supabase client that backs both the identity provider
and the record store. A fresh client is created per browser so that
auth sessions are never shared between users.
"""

from urllib.parse import urlparse

from supabase import Client, create_client

from app.config import Settings, get_settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _describe_project(url: str) -> dict:
    """
    Extract loggable details from a Supabase project URL.

    Args:
        url: Supabase project URL.

    Returns:
        Dictionary with host and hosting flag, never credentials.
    """
    parsed = urlparse(url)
    host = parsed.hostname or "unknown"

    return {
        "host": host,
        "is_hosted": host.endswith(".supabase.co"),
        "scheme": parsed.scheme or "unknown",
    }


def create_supabase_client(settings: Settings | None = None) -> Client:
    """
    Create a Supabase client from configuration.

    Args:
        settings: Optional explicit settings (defaults to environment).

    Returns:
        Client: Configured Supabase client.

    Raises:
        RuntimeError: If the client cannot be constructed.
    """
    settings = settings or get_settings()
    project = _describe_project(settings.SUPABASE_URL)

    logger.info("Creating Supabase client", extra=project)

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as exc:
        logger.critical(
            "Failed to create Supabase client",
            extra={"host": project["host"], "error": str(exc)},
        )
        raise RuntimeError(
            f"Unable to create Supabase client for {project['host']}"
        ) from exc
