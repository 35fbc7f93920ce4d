"""
Data models for the intake service.
"""

from .records import (
    ContactRecord,
    InvestorRecord,
    LeadRecord,
    RecordIdClock,
    new_record_id,
    utc_timestamp,
)

__all__ = [
    "LeadRecord",
    "ContactRecord",
    "InvestorRecord",
    "RecordIdClock",
    "new_record_id",
    "utc_timestamp",
]
