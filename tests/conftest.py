"""
Pytest configuration and fixtures.

Provides in-memory stand-ins for the identity provider, the record
store and the notification surface.
"""

import os
import threading
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Optional

import pytest

from app.common.notifications import Severity, Toast
from app.identity_service.schemas import Identity
from app.settings_service.store import RecordStoreError, UNIQUE_VIOLATION


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set required environment variables for Settings validation."""

    test_env = {
        "EVENTBELL_SUPABASE_URL": "https://test.supabase.co",
        "EVENTBELL_SUPABASE_KEY": "test-supabase-key",
    }
    originals = {key: os.environ.get(key) for key in test_env}
    os.environ.update(test_env)

    from app.config import get_settings

    get_settings.cache_clear()

    yield

    for key, original in originals.items():
        if original is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original
    get_settings.cache_clear()


# =================================================
# IDENTITY PROVIDER
# =================================================
class FakeSubscription:
    def __init__(self, provider: "FakeIdentityProvider", callback) -> None:
        self._provider = provider
        self._callback = callback

    def cancel(self) -> None:
        self._provider.callbacks.remove(self._callback)
        self._provider.cancelled += 1


class FakeIdentityProvider:
    """
    Identity provider whose one-shot query can be held back.

    Clear ``query_gate`` to keep ``get_current_identity`` pending until
    the test sets it again.
    """

    def __init__(
        self,
        identity: Optional[Identity] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.identity = identity
        self.error = error
        self.query_gate = threading.Event()
        self.query_gate.set()
        self.callbacks: List = []
        self.cancelled = 0
        self.queries = 0

    def get_current_identity(self) -> Optional[Identity]:
        self.queries += 1
        if not self.query_gate.wait(timeout=5):
            raise TimeoutError("query gate never opened")
        if self.error is not None:
            raise self.error
        return self.identity

    def on_identity_changed(self, callback) -> FakeSubscription:
        self.callbacks.append(callback)
        return FakeSubscription(self, callback)

    def emit(self, identity: Optional[Identity]) -> None:
        for callback in list(self.callbacks):
            callback(identity)


# =================================================
# RECORD STORE
# =================================================
class FakeRecordStore:
    """
    In-memory record store.

    Args:
        unique_user_id: Reject a second row with the same ``user_id``
            the way a unique index would.
    """

    def __init__(self, unique_user_id: bool = False) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.unique_user_id = unique_user_id
        self.failures: Dict[str, RecordStoreError] = {}
        self.calls: List[str] = []

    def fail(self, operation: str, message: str = "boom", code: Optional[str] = None) -> None:
        self.failures[operation] = RecordStoreError(message, code=code)

    def rows(self, table: str = "users") -> List[Dict[str, Any]]:
        return self.tables[table]

    def _record_call(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failures:
            raise self.failures[operation]

    @staticmethod
    def _matches(row: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in filters.items())

    def select(self, table: str, filters: Mapping[str, Any]) -> List[Dict[str, Any]]:
        self._record_call("select")
        return [dict(row) for row in self.tables[table] if self._matches(row, filters)]

    def insert(self, table: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        self._record_call("insert")
        rows = self.tables[table]
        if self.unique_user_id and any(
            row.get("user_id") == record.get("user_id") for row in rows
        ):
            raise RecordStoreError(
                'duplicate key value violates unique constraint "users_user_id_key"',
                code=UNIQUE_VIOLATION,
            )
        row = {"id": len(rows) + 1, **record}
        rows.append(row)
        return dict(row)

    def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        self._record_call("update")
        updated = []
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(patch)
                updated.append(dict(row))
        return updated


# =================================================
# NOTIFIER
# =================================================
class RecordingNotifier:
    def __init__(self) -> None:
        self.toasts: List[Toast] = []

    def notify(self, toast: Toast) -> None:
        self.toasts.append(toast)

    @property
    def destructive(self) -> List[Toast]:
        return [t for t in self.toasts if t.severity is Severity.DESTRUCTIVE]


@pytest.fixture
def user_one() -> Identity:
    return Identity(id="u1", email="one@example.com")


@pytest.fixture
def user_two() -> Identity:
    return Identity(id="u2", email="two@example.com")


@pytest.fixture
def provider(user_one) -> FakeIdentityProvider:
    return FakeIdentityProvider(identity=user_one)


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_provider():
    return FakeIdentityProvider


@pytest.fixture
def make_store():
    return FakeRecordStore
