"""
Record store contract and its Supabase implementation.

All operations are single-attempt remote calls. Failures surface as
``RecordStoreError``; nothing else escapes this boundary.
"""

from typing import Any, Dict, List, Mapping, Protocol

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from app.utils.logger import get_logger

logger = get_logger(__name__)

Row = Dict[str, Any]

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class RecordStoreError(RuntimeError):
    """Raised when a record store operation fails."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION


class RecordStore(Protocol):
    def select(self, table: str, filters: Mapping[str, Any]) -> List[Row]: ...

    def insert(self, table: str, record: Mapping[str, Any]) -> Row: ...

    def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> List[Row]: ...


class SupabaseRecordStore:
    """Record store backed by Supabase (PostgREST) tables."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def select(self, table: str, filters: Mapping[str, Any]) -> List[Row]:
        """
        Fetch all rows matching every equality filter.

        Raises:
            RecordStoreError: On request or backend failure.
        """
        query = self._client.table(table).select("*")
        for column, value in filters.items():
            query = query.eq(column, value)

        response = self._execute(query, operation="select", table=table)
        return list(response.data or [])

    def insert(self, table: str, record: Mapping[str, Any]) -> Row:
        """
        Insert one row and return it as stored.

        Raises:
            RecordStoreError: On request or backend failure, including
                constraint violations.
        """
        query = self._client.table(table).insert(dict(record))
        response = self._execute(query, operation="insert", table=table)

        if not response.data:
            raise RecordStoreError(f"Insert into {table} returned no rows")

        return response.data[0]

    def update(
        self,
        table: str,
        filters: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> List[Row]:
        """
        Patch all rows matching the filters.

        Returns:
            The updated rows (empty when nothing matched).

        Raises:
            RecordStoreError: On request or backend failure.
        """
        query = self._client.table(table).update(dict(patch))
        for column, value in filters.items():
            query = query.eq(column, value)

        response = self._execute(query, operation="update", table=table)
        return list(response.data or [])

    def _execute(self, query, *, operation: str, table: str):
        try:
            return query.execute()

        except APIError as exc:
            logger.error(
                "Record store rejected request",
                extra={
                    "operation": operation,
                    "table": table,
                    "code": exc.code,
                    "error": exc.message,
                },
            )
            raise RecordStoreError(
                exc.message or f"{operation} on {table} failed",
                code=exc.code,
            ) from exc

        except httpx.HTTPError as exc:
            logger.exception(
                "Record store request failed",
                extra={"operation": operation, "table": table},
            )
            raise RecordStoreError(
                f"Unable to reach record store for {operation} on {table}"
            ) from exc

    def close(self) -> None:
        """Release the PostgREST HTTP connections of this client."""
        # Synchronous on the sync client despite the name
        self._client.postgrest.aclose()
