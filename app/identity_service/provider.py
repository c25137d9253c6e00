"""
Identity provider contract and its Supabase implementation.

The provider answers "who is signed in right now" and pushes an
event every time that answer changes.
"""

from typing import Callable, Optional, Protocol

import httpx
from supabase import Client
from supabase_auth.errors import AuthError

from app.identity_service.schemas import Identity
from app.utils.logger import get_logger

logger = get_logger(__name__)

IdentityCallback = Callable[[Optional[Identity]], None]


class AuthenticationError(RuntimeError):
    """Raised when sign-in, sign-up or sign-out fails."""


class SubscriptionHandle(Protocol):
    def cancel(self) -> None: ...


class IdentityProvider(Protocol):
    def get_current_identity(self) -> Optional[Identity]: ...

    def on_identity_changed(self, callback: IdentityCallback) -> SubscriptionHandle: ...


class _SupabaseSubscription:
    """Adapts a Supabase auth subscription to ``SubscriptionHandle``."""

    def __init__(self, subscription) -> None:
        self._subscription = subscription

    def cancel(self) -> None:
        self._subscription.unsubscribe()


class SupabaseIdentityProvider:
    """Identity provider backed by Supabase Auth."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def get_current_identity(self) -> Optional[Identity]:
        """
        Query the currently signed-in user.

        Returns:
            The identity, or None when nobody is signed in.
        """
        response = self._client.auth.get_user()

        if response is None or response.user is None:
            return None

        return Identity.from_user(response.user)

    def on_identity_changed(self, callback: IdentityCallback) -> SubscriptionHandle:
        """
        Subscribe to auth state changes.

        Args:
            callback: Invoked with the new identity, or None on sign-out.

        Returns:
            Handle whose ``cancel()`` ends the subscription.
        """

        def _listener(event, session) -> None:
            user = session.user if session is not None else None
            logger.debug("Auth state changed", extra={"event": str(event)})
            callback(Identity.from_user(user) if user is not None else None)

        subscription = self._client.auth.on_auth_state_change(_listener)
        return _SupabaseSubscription(subscription)

    def sign_in(self, email: str, password: str) -> Identity:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: On invalid credentials or provider failure.
        """
        logger.info("Attempting user login")

        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            logger.warning("Login rejected", extra={"error": str(exc)})
            raise AuthenticationError("Invalid email or password") from exc
        except httpx.HTTPError as exc:
            logger.exception("Login request failed")
            raise AuthenticationError("Authentication service unreachable") from exc

        if response.user is None:
            raise AuthenticationError("Login returned no user")

        return Identity.from_user(response.user)

    def sign_up(self, email: str, password: str) -> Optional[Identity]:
        """
        Register a new account.

        Returns:
            The new identity if a session was opened immediately, or None
            when the project requires email confirmation first.

        Raises:
            AuthenticationError: On provider failure.
        """
        logger.info("Attempting user signup")

        try:
            response = self._client.auth.sign_up(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            logger.warning("Signup rejected", extra={"error": str(exc)})
            raise AuthenticationError("Signup failed") from exc
        except httpx.HTTPError as exc:
            logger.exception("Signup request failed")
            raise AuthenticationError("Authentication service unreachable") from exc

        if response.session is None or response.user is None:
            return None

        return Identity.from_user(response.user)

    def sign_out(self) -> None:
        """
        End the current session.

        Raises:
            AuthenticationError: On provider failure.
        """
        logger.info("Attempting user logout")

        try:
            self._client.auth.sign_out()
        except (AuthError, httpx.HTTPError) as exc:
            logger.exception("Logout failed")
            raise AuthenticationError("Logout failed") from exc

    def close(self) -> None:
        """Release the auth HTTP connections of this client."""
        self._client.auth.close()
