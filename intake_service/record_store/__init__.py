"""
Record Store

Durable append-only collections and a mutable analytics document, safe
under concurrent writers.
"""

from .base import (
    ANALYTICS,
    CONTACTS,
    INVESTORS,
    LEADS,
    DEFAULT_COLLECTIONS,
    DEFAULT_DOCUMENTS,
    RecordStore,
)
from .errors import (
    CorruptDataError,
    LockTimeoutError,
    StoreError,
    StoreIOError,
    UnknownCollectionError,
)
from .file_store import JsonFileRecordStore
from .locking import LockRegistry, RetryPolicy
from .memory_store import InMemoryRecordStore

__all__ = [
    "ANALYTICS",
    "CONTACTS",
    "INVESTORS",
    "LEADS",
    "DEFAULT_COLLECTIONS",
    "DEFAULT_DOCUMENTS",
    "RecordStore",
    "JsonFileRecordStore",
    "InMemoryRecordStore",
    "LockRegistry",
    "RetryPolicy",
    "StoreError",
    "StoreIOError",
    "CorruptDataError",
    "LockTimeoutError",
    "UnknownCollectionError",
]
