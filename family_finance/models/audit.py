"""
Audit Models for Family Finance

Every write and every sign-in is logged as a structured event.
This provides:
1. Traceability of who changed which row
2. Debugging information when the backend rejects a write
3. A record of exports and template imports

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """What happened."""
    # Authentication
    SIGNED_IN = "signed_in"
    SIGN_IN_FAILED = "sign_in_failed"
    SIGNED_OUT = "signed_out"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"

    # Record writes
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    RECORD_SOFT_DELETED = "record_soft_deleted"
    RECORD_RESTORED = "record_restored"
    SAVE_FAILED = "save_failed"

    # Bulk operations
    TEMPLATE_IMPORTED = "template_imported"
    TEMPLATE_IMPORT_FAILED = "template_import_failed"
    EXPORT_GENERATED = "export_generated"

    # Reads
    LOAD_FAILED = "load_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """One logged occurrence: who, which table and row, what happened."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which row is this about?
    user_id: Optional[str] = Field(
        default=None,
        description="User the event belongs to"
    )
    table: Optional[str] = Field(
        default=None,
        description="Table name (e.g., 'accounts', 'transactions')"
    )
    record_id: Optional[str] = Field(
        default=None,
        description="ID of the row this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=True,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Flat JSON-friendly dict for the structlog renderer."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "table": self.table,
            "record_id": self.record_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Constructors for the events the app emits.

    Usage:
        event = AuditEventBuilder.record_created("accounts", record_id, user_id)
        event = AuditEventBuilder.save_failed("transactions", user_id, message)
    """

    @staticmethod
    def signed_in(user_id: str, email: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGNED_IN,
            user_id=user_id,
            description=f"User signed in: {email or user_id}",
            details={"email": email},
        )

    @staticmethod
    def sign_in_failed(email: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_IN_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Sign-in failed for {email}",
            details={"email": email},
            error_message=error_message,
        )

    @staticmethod
    def signed_out(user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGNED_OUT,
            user_id=user_id,
            description="User signed out",
        )

    @staticmethod
    def password_reset_requested(email: str, succeeded: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PASSWORD_RESET_REQUESTED,
            severity=AuditSeverity.INFO if succeeded else AuditSeverity.WARNING,
            description=f"Password reset requested for {email}",
            details={"email": email, "sent": succeeded},
        )

    @staticmethod
    def record_created(table: str, record_id: Optional[str], user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            user_id=user_id,
            table=table,
            record_id=record_id,
            description=f"Created row in {table}",
        )

    @staticmethod
    def record_updated(table: str, record_id: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            user_id=user_id,
            table=table,
            record_id=record_id,
            description=f"Updated row {record_id} in {table}",
        )

    @staticmethod
    def record_deleted(table: str, record_id: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            table=table,
            record_id=record_id,
            description=f"Deleted row {record_id} from {table}",
        )

    @staticmethod
    def record_soft_deleted(table: str, record_id: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SOFT_DELETED,
            user_id=user_id,
            table=table,
            record_id=record_id,
            description=f"Deactivated row {record_id} in {table}",
        )

    @staticmethod
    def record_restored(table: str, record_id: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_RESTORED,
            user_id=user_id,
            table=table,
            record_id=record_id,
            description=f"Restored row {record_id} in {table}",
        )

    @staticmethod
    def save_failed(
        table: str,
        user_id: Optional[str],
        error_message: str,
        record_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            table=table,
            record_id=record_id,
            description=f"Write to {table} failed",
            error_message=error_message,
        )

    @staticmethod
    def template_imported(user_id: str, item_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TEMPLATE_IMPORTED,
            user_id=user_id,
            table="fixed_expenses",
            description=f"Imported {item_count} fixed expense template items",
            details={"item_count": item_count},
        )

    @staticmethod
    def template_import_failed(user_id: str, hint: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TEMPLATE_IMPORT_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            table="fixed_expenses",
            description="Fixed expense template import failed",
            details={"hint": hint},
            error_message=error_message,
        )

    @staticmethod
    def export_generated(user_id: str, export_name: str, sheet_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            user_id=user_id,
            description=f"Generated export {export_name}",
            details={"export": export_name, "sheet_count": sheet_count},
        )

    @staticmethod
    def load_failed(table: str, user_id: Optional[str], error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            table=table,
            description=f"Loading {table} failed",
            error_message=error_message,
            is_user_action=False,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
            is_user_action=False,
        )
