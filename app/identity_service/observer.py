"""
Session observer.

Keeps a local session state in sync with the identity provider by
combining a one-shot "who is signed in" query with the provider's
change feed. Every resolution attempt carries a ticket; the one-shot
query takes its ticket before the feed opens and events take theirs
on arrival, so a feed event always supersedes a slower query result.
"""

import asyncio
import itertools
from typing import Callable, List, Optional

from app.identity_service.provider import IdentityProvider, SubscriptionHandle
from app.identity_service.schemas import Identity, SessionState, SessionStatus
from app.utils.logger import get_logger

logger = get_logger(__name__)

StateListener = Callable[[SessionState], None]


class SessionObserver:
    """
    Expose the current session state of one UI session.

    Usage:
        observer = SessionObserver(provider, on_change=render)
        await observer.initialize()
        ...
        observer.dispose()
    """

    def __init__(
        self,
        provider: IdentityProvider,
        on_change: Optional[StateListener] = None,
    ) -> None:
        self._provider = provider
        self._listeners: List[StateListener] = [on_change] if on_change else []

        self._state = SessionState.unresolved()
        self._tickets = itertools.count(1)
        self._applied_ticket = 0

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._subscription: Optional[SubscriptionHandle] = None
        self._started = False
        self._disposed = False

    # -------------------------------------------------
    # State
    # -------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> Optional[Identity]:
        return self._state.identity

    @property
    def loading(self) -> bool:
        return self._state.status is SessionStatus.UNRESOLVED

    @property
    def disposed(self) -> bool:
        return self._disposed

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------
    async def initialize(self) -> None:
        """
        Open the change feed and resolve the current identity.

        Only the first call does any work. A failed query resolves to
        an anonymous session and is never raised.
        """
        if self._started or self._disposed:
            return

        self._started = True
        self._loop = asyncio.get_running_loop()

        query_ticket = next(self._tickets)
        self._subscription = self._provider.on_identity_changed(self._receive_event)

        try:
            identity = await asyncio.to_thread(self._provider.get_current_identity)
        except Exception:
            logger.exception("Current identity query failed; treating as anonymous")
            identity = None

        self._resolve(query_ticket, identity, source="query")

    def dispose(self) -> None:
        """Cancel the change feed and drop every later update."""
        if self._disposed:
            return

        self._disposed = True
        subscription, self._subscription = self._subscription, None

        if subscription is not None:
            try:
                subscription.cancel()
            except Exception:
                logger.exception("Failed to cancel identity subscription")

        logger.debug("Session observer disposed")

    async def __aenter__(self) -> "SessionObserver":
        try:
            await self.initialize()
        except BaseException:
            self.dispose()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # -------------------------------------------------
    # Resolution
    # -------------------------------------------------
    def _receive_event(self, identity: Optional[Identity]) -> None:
        """Entry point for the change feed; may run on any thread."""
        if self._disposed:
            return

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if self._loop is not None and running is not self._loop:
            self._loop.call_soon_threadsafe(self._apply_event, identity)
        else:
            self._apply_event(identity)

    def _apply_event(self, identity: Optional[Identity]) -> None:
        if self._disposed:
            return
        self._resolve(next(self._tickets), identity, source="event")

    def _resolve(
        self,
        ticket: int,
        identity: Optional[Identity],
        *,
        source: str,
    ) -> None:
        if self._disposed:
            return

        if ticket <= self._applied_ticket:
            logger.debug(
                "Discarding superseded identity result",
                extra={"source": source, "ticket": ticket},
            )
            return

        self._applied_ticket = ticket
        previous, self._state = self._state, SessionState.from_identity(identity)

        # Token refreshes re-announce the same user
        if self._state == previous:
            logger.debug("Session state unchanged", extra={"source": source})
            return

        logger.debug(
            "Session state resolved",
            extra={"source": source, "status": self._state.status.value},
        )

        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Session state listener failed")
