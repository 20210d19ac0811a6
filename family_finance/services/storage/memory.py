"""
In-memory Storage Implementation

Behaves like the hosted tables closely enough for tests and for running
the app without a backend: ids and created_at are generated on insert,
reads are scoped by user_id, upserts match on the conflict columns.
"""

from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Optional, Sequence
from uuid import uuid4

from family_finance.services.storage.interface import (
    NotFoundError,
    OrderBy,
    RecordStorageInterface,
    StorageError,
)


def _sort_key(column: str):
    # None sorts last, like Postgres ascending order
    def key(row: dict):
        value = row.get(column)
        return (value is None, "" if value is None else value)
    return key


class InMemoryRecordStorage(RecordStorageInterface):
    """Dict-of-lists storage. Not thread-safe; one instance per test or session."""

    def __init__(self, tables: Optional[dict[str, list[dict]]] = None):
        self._tables: dict[str, list[dict]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self._pending_error: Optional[str] = None

    def fail_next(self, message: str) -> None:
        """Make the next call raise StorageError(message)."""
        self._pending_error = message

    def _check_failure(self) -> None:
        if self._pending_error is not None:
            message, self._pending_error = self._pending_error, None
            raise StorageError(message)

    def rows(self, table: str) -> list[dict]:
        """Raw view of a table, for assertions."""
        return self._tables.setdefault(table, [])

    def _new_row(self, payload: dict) -> dict:
        row = deepcopy(payload)
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return row

    async def list_records(
        self,
        table: str,
        user_id: str,
        order_by: OrderBy = (),
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict]:
        self._check_failure()
        result = [
            deepcopy(row)
            for row in self.rows(table)
            if row.get("user_id") == user_id
            and all(row.get(col) == value for col, value in (filters or {}).items())
        ]
        for column, descending in reversed(list(order_by)):
            result.sort(key=_sort_key(column), reverse=descending)
        return result

    async def insert_record(self, table: str, payload: dict) -> dict:
        self._check_failure()
        row = self._new_row(payload)
        self.rows(table).append(row)
        return deepcopy(row)

    async def update_record(
        self,
        table: str,
        record_id: str,
        user_id: str,
        payload: dict,
    ) -> dict:
        self._check_failure()
        for row in self.rows(table):
            if str(row.get("id")) == str(record_id) and row.get("user_id") == user_id:
                row.update(deepcopy(payload))
                return deepcopy(row)
        raise NotFoundError(f"Row not found: {table}/{record_id}")

    async def delete_record(self, table: str, record_id: str, user_id: str) -> bool:
        self._check_failure()
        rows = self.rows(table)
        for idx, row in enumerate(rows):
            if str(row.get("id")) == str(record_id) and row.get("user_id") == user_id:
                del rows[idx]
                return True
        return False

    async def upsert_records(
        self,
        table: str,
        payloads: list[dict],
        on_conflict: Sequence[str],
    ) -> list[dict]:
        self._check_failure()
        stored = []
        rows = self.rows(table)
        for payload in payloads:
            match = next(
                (
                    row for row in rows
                    if all(row.get(col) == payload.get(col) for col in on_conflict)
                ),
                None,
            )
            if match is not None:
                match.update(deepcopy(payload))
                stored.append(deepcopy(match))
            else:
                row = self._new_row(payload)
                rows.append(row)
                stored.append(deepcopy(row))
        return stored
