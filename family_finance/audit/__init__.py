"""Audit logging package."""

from family_finance.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
