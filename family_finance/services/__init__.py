"""External service integrations: storage, auth and Excel export."""

from family_finance.services.auth import AuthError, AuthService
from family_finance.services.export import (
    ExportFile,
    export_account_overview,
    export_accounts,
    export_balance_snapshot,
    export_transactions,
    export_worklogs,
    sanitize_sheet_name,
)
from family_finance.services.storage import (
    ConnectionError,
    InMemoryRecordStorage,
    NotFoundError,
    RecordStorageInterface,
    StorageError,
    SupabaseClient,
    SupabaseRecordStorage,
)

__all__ = [
    # Auth
    "AuthError",
    "AuthService",
    # Export
    "ExportFile",
    "export_account_overview",
    "export_accounts",
    "export_balance_snapshot",
    "export_transactions",
    "export_worklogs",
    "sanitize_sheet_name",
    # Storage
    "ConnectionError",
    "InMemoryRecordStorage",
    "NotFoundError",
    "RecordStorageInterface",
    "StorageError",
    "SupabaseClient",
    "SupabaseRecordStorage",
]
