"""
Audit Logger

DESIGN DECISION: Every write, sign-in and export is logged.
This provides:
1. Traceability of changes to the user's rows
2. The backend's error text when a write is rejected
3. A trail for template imports, which touch many rows at once

The audit logger:
- Writes structured JSON through structlog
- Keeps the most recent events of its session in memory, oldest first
- Keeps nothing in the database (the tables hold finance data only)
"""

import logging
from collections import deque
from typing import Optional

import structlog

from family_finance.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (and so structlog) to stderr at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


RECENT_EVENTS_LIMIT = 200


class AuditLogger:
    """
    Emits audit events for one browser session.

    Every page view-model of the session shares the instance.
    """

    def __init__(self, max_events: int = RECENT_EVENTS_LIMIT):
        self._logger = structlog.get_logger("family_finance.audit")
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    @property
    def events(self) -> list[AuditEvent]:
        """The most recent events logged by this instance, oldest first."""
        return list(self._events)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at a level matching its severity."""
        self._events.append(event)
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity is AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    # -- authentication -------------------------------------------------

    def log_signed_in(self, user_id: str, email: Optional[str]) -> None:
        self.log(AuditEventBuilder.signed_in(user_id=user_id, email=email))

    def log_sign_in_failed(self, email: str, error_message: str) -> None:
        self.log(AuditEventBuilder.sign_in_failed(email=email, error_message=error_message))

    def log_signed_out(self, user_id: Optional[str]) -> None:
        self.log(AuditEventBuilder.signed_out(user_id=user_id))

    def log_password_reset(self, email: str, succeeded: bool) -> None:
        self.log(AuditEventBuilder.password_reset_requested(email=email, succeeded=succeeded))

    # -- record writes --------------------------------------------------

    def log_record_created(self, table: str, record_id: Optional[str], user_id: str) -> None:
        """Log an insert."""
        self.log(AuditEventBuilder.record_created(table, record_id, user_id))

    def log_record_updated(self, table: str, record_id: str, user_id: str) -> None:
        """Log an update."""
        self.log(AuditEventBuilder.record_updated(table, record_id, user_id))

    def log_record_deleted(self, table: str, record_id: str, user_id: str) -> None:
        """Log a hard delete."""
        self.log(AuditEventBuilder.record_deleted(table, record_id, user_id))

    def log_record_soft_deleted(self, table: str, record_id: str, user_id: str) -> None:
        self.log(AuditEventBuilder.record_soft_deleted(table, record_id, user_id))

    def log_record_restored(self, table: str, record_id: str, user_id: str) -> None:
        self.log(AuditEventBuilder.record_restored(table, record_id, user_id))

    def log_save_failed(
        self,
        table: str,
        user_id: Optional[str],
        error_message: str,
        record_id: Optional[str] = None,
    ) -> None:
        """Log a write the backend rejected."""
        self.log(AuditEventBuilder.save_failed(
            table=table,
            user_id=user_id,
            error_message=error_message,
            record_id=record_id,
        ))

    # -- bulk operations ------------------------------------------------

    def log_template_imported(self, user_id: str, item_count: int) -> None:
        self.log(AuditEventBuilder.template_imported(user_id=user_id, item_count=item_count))

    def log_template_import_failed(self, user_id: str, hint: str, error_message: str) -> None:
        self.log(AuditEventBuilder.template_import_failed(
            user_id=user_id,
            hint=hint,
            error_message=error_message,
        ))

    def log_export(self, user_id: str, export_name: str, sheet_count: int) -> None:
        self.log(AuditEventBuilder.export_generated(
            user_id=user_id,
            export_name=export_name,
            sheet_count=sheet_count,
        ))

    # -- reads and errors -----------------------------------------------

    def log_load_failed(self, table: str, user_id: Optional[str], error_message: str) -> None:
        """Log a failed fetch; the page continues with an empty list."""
        self.log(AuditEventBuilder.load_failed(
            table=table,
            user_id=user_id,
            error_message=error_message,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
