"""
Data Models Package

This package contains all Pydantic models used in Family Finance.
Rows read from storage are parsed into these models before any report
or page touches them.
"""

from family_finance.models.records import (
    Account,
    FixedExpense,
    Project,
    Record,
    Transaction,
    TransactionType,
    UserSession,
    WorkLog,
    coerce_date,
    coerce_decimal,
    coerce_time,
    hours_between,
)
from family_finance.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "Account",
    "FixedExpense",
    "Project",
    "Record",
    "Transaction",
    "TransactionType",
    "UserSession",
    "WorkLog",
    "coerce_date",
    "coerce_decimal",
    "coerce_time",
    "hours_between",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
