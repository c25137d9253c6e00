"""
User settings service.

Reads and writes the per-user settings record (API key and Discord id)
and reports outcomes through a notifier. Holds the locally displayed
copy of the record; the store remains the source of truth.
"""

import asyncio
import secrets
from typing import Callable, List, Optional

from app.common.notifications import Notifier, Toast
from app.identity_service.schemas import Identity
from app.settings_service.schemas import SettingsRecord
from app.settings_service.store import RecordStore, RecordStoreError, Row
from app.utils.logger import get_logger

logger = get_logger(__name__)


def generate_api_key(num_bytes: int = 32) -> str:
    """Return a URL-safe API key drawn from a CSPRNG."""
    return secrets.token_urlsafe(num_bytes)


class UserSettingsService:
    """Settings record operations for the signed-in user."""

    def __init__(
        self,
        store: RecordStore,
        notifier: Notifier,
        *,
        table: str = "users",
        key_bytes: int = 32,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._table = table
        self._key_bytes = key_bytes

        self.api_key: Optional[str] = None
        self.chat_id: Optional[str] = None
        self.loading: bool = False
        self.busy: bool = False
        # Owner of the values in api_key / chat_id
        self.user_id: Optional[str] = None

    # -------------------------------------------------
    # Read
    # -------------------------------------------------
    async def fetch(self, identity: Identity) -> Optional[SettingsRecord]:
        """
        Load the identity's record into the local fields.

        A failed load keeps the values already shown for this identity;
        values belonging to another identity are cleared first.

        Returns:
            The record shown, or None when there is none or loading failed.
        """
        if self.user_id != identity.id:
            self._show(None)
            self.user_id = identity.id

        self.loading = True

        try:
            rows = await self._select(identity)
        except RecordStoreError as exc:
            self._notifier.notify(Toast.error("Error fetching user data", exc.message))
            return None
        finally:
            self.loading = False

        record = self._first(rows, identity)
        self._show(record)
        return record

    # -------------------------------------------------
    # Write
    # -------------------------------------------------
    async def create_key(self, identity: Identity) -> Optional[str]:
        """
        Give the identity an API key, creating its record if needed.

        An existing key is reused, so repeated calls never create a
        second record.

        Returns:
            The key now shown, or None if the action was skipped or failed.
        """
        if self.busy:
            return None

        self.busy = True
        try:
            record = await self._ensure_key(identity)
        except RecordStoreError as exc:
            logger.error(
                "API key generation failed",
                extra={"user_id": identity.id, "error": exc.message},
            )
            self._notifier.notify(Toast.error("Error generating API key", exc.message))
            return None
        finally:
            self.busy = False

        self._show(record)
        self.user_id = identity.id
        return self.api_key

    async def update_chat_id(self, identity: Identity, value: str) -> bool:
        """
        Save the Discord id on the identity's record.

        Returns:
            True on success. On failure the shown value is left untouched.
        """
        if self.busy:
            return False

        value = value.strip()
        self.busy = True

        try:
            updated = await asyncio.to_thread(
                self._store.update,
                self._table,
                {"user_id": identity.id},
                {"discord_id": value},
            )
            if not updated:
                logger.info(
                    "No settings record to update; creating one",
                    extra={"user_id": identity.id},
                )
                await asyncio.to_thread(
                    self._store.insert,
                    self._table,
                    {"user_id": identity.id, "discord_id": value},
                )
        except RecordStoreError:
            logger.exception("Discord ID update failed", extra={"user_id": identity.id})
            self._notifier.notify(
                Toast.error("Error", "Failed to update Discord ID. Please try again.")
            )
            return False
        finally:
            self.busy = False

        self.chat_id = value
        self._notifier.notify(
            Toast(
                title="Discord ID Updated",
                description="Your Discord ID has been successfully updated.",
            )
        )
        return True

    def copy_api_key(self, write: Callable[[str], None]) -> None:
        """Copy the shown API key through the given clipboard writer."""
        if not self.api_key:
            return

        write(self.api_key)
        self._notifier.notify(
            Toast(
                title="API Key Copied",
                description="Your API key has been copied to the clipboard.",
            )
        )

    # -------------------------------------------------
    # Internals
    # -------------------------------------------------
    async def _select(self, identity: Identity) -> List[Row]:
        return await asyncio.to_thread(
            self._store.select,
            self._table,
            {"user_id": identity.id},
        )

    async def _ensure_key(self, identity: Identity) -> SettingsRecord:
        existing = self._first(await self._select(identity), identity)

        if existing is not None and existing.api:
            logger.info("Reusing existing API key", extra={"user_id": identity.id})
            return existing

        key = generate_api_key(self._key_bytes)

        if existing is not None:
            rows = await asyncio.to_thread(
                self._store.update,
                self._table,
                {"user_id": identity.id},
                {"api": key},
            )
            if rows:
                return SettingsRecord.model_validate(rows[0])
            # Deleted meanwhile or hidden by row-level security
            logger.warning(
                "API key update matched no rows; inserting instead",
                extra={"user_id": identity.id},
            )

        try:
            row = await asyncio.to_thread(
                self._store.insert,
                self._table,
                {"user_id": identity.id, "api": key},
            )
        except RecordStoreError as exc:
            if not exc.is_unique_violation:
                raise
            # Another request created the record first; adopt it
            logger.warning(
                "Settings record already exists; reloading",
                extra={"user_id": identity.id},
            )
            winner = self._first(await self._select(identity), identity)
            if winner is None:
                raise
            if not winner.api:
                raise RecordStoreError(
                    "Unable to store an API key for this account"
                ) from exc
            return winner

        logger.info("Created settings record with API key", extra={"user_id": identity.id})
        return SettingsRecord.model_validate(row)

    def _first(self, rows: List[Row], identity: Identity) -> Optional[SettingsRecord]:
        if not rows:
            return None

        if len(rows) > 1:
            logger.warning(
                "Multiple settings records for one user; using the first",
                extra={"user_id": identity.id, "count": len(rows)},
            )

        return SettingsRecord.model_validate(rows[0])

    def _show(self, record: Optional[SettingsRecord]) -> None:
        self.api_key = record.api if record else None
        self.chat_id = record.discord_id if record else None
