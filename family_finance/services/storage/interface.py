"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Talk to the hosted Supabase tables in production
2. Use in-memory storage for tests and offline demos
3. Keep page logic decoupled from the query client

The interface is intentionally small - rows go in and out as plain dicts
and the page layer parses them into models. Every read is scoped by
user_id; writes carry user_id in the payload and updates/deletes filter
on it as well. Row-level security on the backend is assumed to exist but
is not relied on for scoping.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


# (column, descending)
OrderBy = Sequence[tuple[str, bool]]


class RecordStorageInterface(ABC):
    """
    Abstract interface for table storage operations.

    Any storage implementation (Supabase, in-memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def list_records(
        self,
        table: str,
        user_id: str,
        order_by: OrderBy = (),
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        """
        List a user's rows.

        Args:
            table: Table name
            user_id: Owner of the rows
            order_by: Sort keys as (column, descending) pairs
            filters: Extra equality filters

        Returns:
            Rows as dicts

        Raises:
            StorageError: If the query fails
        """
        pass

    @abstractmethod
    async def insert_record(self, table: str, payload: dict) -> dict:
        """
        Insert one row.

        Returns:
            The stored row (with server-generated columns)

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def update_record(
        self,
        table: str,
        record_id: str,
        user_id: str,
        payload: dict,
    ) -> dict:
        """
        Update one of the user's rows.

        Raises:
            StorageError: If the update fails
            NotFoundError: If no row matched
        """
        pass

    @abstractmethod
    async def delete_record(self, table: str, record_id: str, user_id: str) -> bool:
        """
        Hard-delete one of the user's rows.

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def upsert_records(
        self,
        table: str,
        payloads: list[dict],
        on_conflict: Sequence[str],
    ) -> list[dict]:
        """
        Insert rows, updating existing rows that collide on `on_conflict`.

        There is no rollback: a failure may leave part of the batch applied.

        Raises:
            StorageError: If the upsert fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations. The message is the backend's text."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
