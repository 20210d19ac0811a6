"""
Supabase Storage Implementation

DESIGN DECISION: Rows live in a hosted Postgres (Supabase) reached over
its PostgREST query client because:
1. Auth, storage and row-level security come from one service
2. No server of our own to run
3. The same tables are reachable from the SQL console for fixes

TRADEOFFS:
- No multi-table transactions (each call stands alone)
- No retries on data calls; the user resubmits
- Filtering and grouping happen in Python after the fetch

The implementation follows the abstract interface, so tests and offline
use can swap in the in-memory store without changing page logic.
"""

from typing import Any, Optional, Sequence

import structlog
from supabase import Client, create_client
from tenacity import retry, stop_after_attempt, wait_exponential

from family_finance.config import get_settings
from family_finance.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    OrderBy,
    RecordStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


def backend_message(error: Exception) -> str:
    """The backend's own error text, as shown to the user."""
    message = getattr(error, "message", None)
    return str(message) if message else str(error)


class SupabaseClient:
    """
    Low-level Supabase client wrapper.

    Handles construction from settings and retries only the connection
    step. One instance per signed-in browser session: the auth session
    lives on the client and is sent with every query.
    """

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None):
        self._client: Optional[Client] = None
        if url is None or key is None:
            settings = get_settings().supabase
            url = url or settings.url
            key = key or settings.anon_key
        self._url = url
        self._key = key

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> Client:
        """Create the underlying client on first use."""
        if self._client is None:
            try:
                self._client = create_client(self._url, self._key)
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Supabase: {e}")
            logger.info("supabase_connected", url=self._url)
        return self._client

    @property
    def client(self) -> Client:
        return self.connect()


class SupabaseRecordStorage(RecordStorageInterface):
    """
    Supabase implementation of record storage.

    One row per record; every call is a single PostgREST request.
    """

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or SupabaseClient()

    def _table(self, table: str):
        return self._client.client.table(table)

    async def list_records(
        self,
        table: str,
        user_id: str,
        order_by: OrderBy = (),
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        """List a user's rows from a table."""
        try:
            query = self._table(table).select("*").eq("user_id", user_id)
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            for column, descending in order_by:
                query = query.order(column, desc=descending)
            response = query.execute()
        except Exception as e:
            raise StorageError(backend_message(e))
        return list(response.data or [])

    async def insert_record(self, table: str, payload: dict) -> dict:
        """Insert one row."""
        try:
            response = self._table(table).insert(payload).execute()
        except Exception as e:
            raise StorageError(backend_message(e))
        rows = response.data or []
        return rows[0] if rows else dict(payload)

    async def update_record(
        self,
        table: str,
        record_id: str,
        user_id: str,
        payload: dict,
    ) -> dict:
        """Update one of the user's rows."""
        try:
            response = (
                self._table(table)
                .update(payload)
                .eq("id", record_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise StorageError(backend_message(e))
        rows = response.data or []
        if not rows:
            raise NotFoundError(f"Row not found: {table}/{record_id}")
        return rows[0]

    async def delete_record(self, table: str, record_id: str, user_id: str) -> bool:
        """Hard-delete one of the user's rows."""
        try:
            response = (
                self._table(table)
                .delete()
                .eq("id", record_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise StorageError(backend_message(e))
        return bool(response.data)

    async def upsert_records(
        self,
        table: str,
        payloads: list[dict],
        on_conflict: Sequence[str],
    ) -> list[dict]:
        """Insert-or-update a batch keyed on `on_conflict`."""
        try:
            response = (
                self._table(table)
                .upsert(payloads, on_conflict=",".join(on_conflict), ignore_duplicates=False)
                .execute()
            )
        except Exception as e:
            raise StorageError(backend_message(e))
        return list(response.data or [])
