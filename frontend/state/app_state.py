"""
Per-browser service wiring.

Each browser gets its own Supabase client, so auth sessions never leak
between users. Clients are built on first visit and reused by every
page of that browser; the least recently seen browsers are evicted
and their connections closed once the registry is full.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from app.db.supabase_client import create_supabase_client
from app.identity_service.provider import SupabaseIdentityProvider
from app.settings_service.store import SupabaseRecordStore
from frontend.config import settings
from frontend.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class UserServices:
    identity: SupabaseIdentityProvider
    store: SupabaseRecordStore

    def close(self) -> None:
        self.identity.close()
        self.store.close()


def build_user_services() -> UserServices:
    client = create_supabase_client()
    return UserServices(
        identity=SupabaseIdentityProvider(client),
        store=SupabaseRecordStore(client),
    )


class ServiceRegistry:
    def __init__(
        self,
        factory: Callable[[], UserServices] = build_user_services,
        max_browsers: int = 500,
    ) -> None:
        if max_browsers < 1:
            raise ValueError("max_browsers must be at least 1")

        self._factory = factory
        self._max_browsers = max_browsers
        self._services: "OrderedDict[str, UserServices]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._services)

    def for_browser(self, browser_id: str) -> UserServices:
        services = self._services.get(browser_id)

        if services is not None:
            self._services.move_to_end(browser_id)
            return services

        logger.debug("Creating services for new browser")
        services = self._factory()
        self._services[browser_id] = services

        while len(self._services) > self._max_browsers:
            _, evicted = self._services.popitem(last=False)
            self._close(evicted)

        return services

    @staticmethod
    def _close(services: UserServices) -> None:
        try:
            services.close()
        except Exception:
            logger.exception("Failed to close evicted browser services")


registry = ServiceRegistry(max_browsers=settings.MAX_BROWSER_SESSIONS)
