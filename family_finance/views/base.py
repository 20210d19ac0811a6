"""
Page View-Models

DESIGN DECISION: Each page owns a small view-model that holds the
page's list as local state and talks to storage. The Streamlit layer
only renders what the view-model holds and forwards form submissions.

Every page follows the same cycle:
1. load()   - fetch the user's rows, parsed into models
2. save()   - validate the form, then update (when editing) or insert
3. delete() - remove one row
4. after any write, reload the whole list

No caching and no optimistic updates: the list shown is always the
list the backend returned on the last load.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Optional, TypeVar

import structlog

from family_finance.audit import AuditLogger
from family_finance.models.records import Record
from family_finance.services.storage import OrderBy, RecordStorageInterface, StorageError


logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


async def fetch_models(
    storage: RecordStorageInterface,
    table: str,
    user_id: str,
    model: type[RecordT],
    audit_logger: AuditLogger,
    order_by: OrderBy = (),
) -> tuple[list[RecordT], Optional[str]]:
    """
    Fetch and parse a user's rows.

    Returns:
        (rows, error_message). On failure the rows are empty and the
        failure has been logged.
    """
    try:
        rows = await storage.list_records(table, user_id, order_by=order_by)
    except StorageError as e:
        audit_logger.log_load_failed(table, user_id, str(e))
        return [], str(e)
    logger.debug("rows_loaded", table=table, count=len(rows))
    return [model.model_validate(row) for row in rows], None


class CrudView(ABC, Generic[RecordT]):
    """
    Base class for list/create/edit/delete pages.

    Subclasses set the table, the model, the sort order and a form
    validator. Writes raise StorageError with the backend's message;
    the page shows it after a localized "operation failed" label.
    """

    table: str = ""
    model: type[RecordT]
    order_by: OrderBy = ()

    def __init__(
        self,
        storage: RecordStorageInterface,
        user_id: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self.user_id = user_id
        self._audit_logger = audit_logger or AuditLogger()
        self.items: list[RecordT] = []
        self.load_error: Optional[str] = None

    @abstractmethod
    def validate(self, form: Mapping[str, Any]) -> RecordT:
        """
        Turn submitted form data into a model.

        Raises:
            FormValidationError: If the form is not acceptable
        """
        pass

    def parse(self, row: dict) -> RecordT:
        return self.model.model_validate(row)

    async def load(self) -> list[RecordT]:
        """
        Fetch the user's rows.

        A failed fetch is logged and leaves the list empty; the message
        is kept in `load_error` for the page to show.
        """
        self.items, self.load_error = await fetch_models(
            self._storage,
            self.table,
            self.user_id,
            self.model,
            self._audit_logger,
            order_by=self.order_by,
        )
        return self.items

    def get(self, record_id: Optional[str]) -> Optional[RecordT]:
        """The loaded row with this id, if any."""
        if record_id is None:
            return None
        return next((item for item in self.items if item.id == str(record_id)), None)

    async def save(
        self,
        form: Mapping[str, Any],
        editing_id: Optional[str] = None,
    ) -> RecordT:
        """
        Validate and store the form: update when editing, else insert.

        Raises:
            FormValidationError: If validation fails (nothing is sent)
            StorageError: If the backend rejects the write
        """
        record = self.validate(form)
        payload = record.to_payload(user_id=self.user_id)

        try:
            if editing_id:
                row = await self._storage.update_record(
                    self.table, str(editing_id), self.user_id, payload
                )
                self._audit_logger.log_record_updated(self.table, str(editing_id), self.user_id)
            else:
                row = await self._storage.insert_record(self.table, payload)
                self._audit_logger.log_record_created(
                    self.table, _row_id(row), self.user_id
                )
        except StorageError as e:
            self._audit_logger.log_save_failed(
                self.table, self.user_id, str(e), record_id=editing_id
            )
            raise

        await self.load()
        return self.parse(row)

    async def delete(self, record_id: str) -> bool:
        """
        Hard-delete one row, then reload.

        Raises:
            StorageError: If the backend rejects the delete
        """
        try:
            deleted = await self._storage.delete_record(self.table, str(record_id), self.user_id)
        except StorageError as e:
            self._audit_logger.log_save_failed(
                self.table, self.user_id, str(e), record_id=str(record_id)
            )
            raise

        if deleted:
            self._audit_logger.log_record_deleted(self.table, str(record_id), self.user_id)
        await self.load()
        return deleted


def _row_id(row: dict) -> Optional[str]:
    value = row.get("id")
    return None if value is None else str(value)
