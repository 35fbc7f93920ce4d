# Intake service package: record storage, record models and sanitization

from .record_store import (
    RecordStore,
    JsonFileRecordStore,
    InMemoryRecordStore,
    RetryPolicy,
    StoreError,
    StoreIOError,
    CorruptDataError,
    LockTimeoutError,
    UnknownCollectionError,
)
from .models import LeadRecord, ContactRecord, InvestorRecord, new_record_id, utc_timestamp
from .sanitizer import sanitize, is_valid_email, anonymize_email
from .logging_config import (
    setup_logging,
    stop_logging,
    get_logger,
    ThreadSafeLoggingConfig,
)

__all__ = [
    "RecordStore",
    "JsonFileRecordStore",
    "InMemoryRecordStore",
    "RetryPolicy",
    "StoreError",
    "StoreIOError",
    "CorruptDataError",
    "LockTimeoutError",
    "UnknownCollectionError",
    "LeadRecord",
    "ContactRecord",
    "InvestorRecord",
    "new_record_id",
    "utc_timestamp",
    "sanitize",
    "is_valid_email",
    "anonymize_email",
    "setup_logging",
    "stop_logging",
    "get_logger",
    "ThreadSafeLoggingConfig",
]
