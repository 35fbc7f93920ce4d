"""
Submission record models.

This module contains Pydantic models for the records persisted in the
leads, contacts and investors collections. Field names match the stored JSON
layout, so ``model_dump()`` is exactly what lands on disk.
"""

import threading
import time
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


class RecordIdClock:
    """Millisecond ids that never repeat within one process.

    The wall clock is used as-is while it moves forward; when two ids are
    requested in the same millisecond (or the clock steps back) the next id
    is ``last + 1``.
    """

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        now_ms = int(time.time() * 1000)
        with self._lock:
            self._last = max(now_ms, self._last + 1)
            return self._last


_clock = RecordIdClock()


def new_record_id() -> int:
    """Next record id from the process-wide clock."""
    return _clock.next_id()


def utc_timestamp() -> str:
    """Current time as ISO 8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# Fields are declared per model, in stored order, because the CSV export
# takes its header row from the key order of the first record.

class LeadRecord(BaseModel):
    """Landing page signup."""
    id: int = Field(default_factory=new_record_id, description="Millisecond-derived id, unique per process")
    type: Literal["lead"] = "lead"
    name: str = Field(description="Submitter name (sanitized, max 100)")
    email: str = Field(description="Lower-cased email (sanitized, max 254)")
    interest: str = Field(default="general", description="Product interest (max 50)")
    timestamp: str = Field(default_factory=utc_timestamp, description="Creation time (ISO format)")


class ContactRecord(BaseModel):
    """Contact form message."""
    id: int = Field(default_factory=new_record_id, description="Millisecond-derived id, unique per process")
    type: Literal["contact"] = "contact"
    name: str = Field(description="Submitter name (sanitized, max 100)")
    email: str = Field(description="Lower-cased email (sanitized, max 254)")
    subject: str = Field(default="General Inquiry", description="Message subject (max 100)")
    message: str = Field(description="Message body (max 5000)")
    status: str = Field(default="new", description="Triage status")
    timestamp: str = Field(default_factory=utc_timestamp, description="Creation time (ISO format)")


class InvestorRecord(BaseModel):
    """Investor inquiry."""
    id: int = Field(default_factory=new_record_id, description="Millisecond-derived id, unique per process")
    type: Literal["investor"] = "investor"
    name: str = Field(description="Submitter name (sanitized, max 100)")
    email: str = Field(description="Lower-cased email (sanitized, max 254)")
    company: str = Field(default="", description="Company name (max 100)")
    inquiryType: str = Field(default="general", description="Inquiry category (max 50)")
    message: str = Field(default="", description="Message body (max 5000)")
    status: str = Field(default="new", description="Triage status")
    timestamp: str = Field(default_factory=utc_timestamp, description="Creation time (ISO format)")
