"""
Storage Services Package

Provides the abstract interface and concrete implementations for row storage.
Supabase is the production backend; the in-memory store backs tests.
"""

from family_finance.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    OrderBy,
    RecordStorageInterface,
    StorageError,
)
from family_finance.services.storage.memory import InMemoryRecordStorage
from family_finance.services.storage.supabase_store import (
    SupabaseClient,
    SupabaseRecordStorage,
    backend_message,
)

__all__ = [
    # Interface
    "OrderBy",
    "RecordStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryRecordStorage",
    "SupabaseClient",
    "SupabaseRecordStorage",
    "backend_message",
]
