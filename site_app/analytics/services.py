"""
Analytics Service

Page-view counting, referrer history and custom events, all stored in the
single analytics document. Each write is a pure transformation handed to
``RecordStore.mutate`` so concurrent requests never lose an update, and
every write prunes custom events older than the retention window.
"""

import logging
import posixpath
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from intake_service.record_store import ANALYTICS, CorruptDataError, RecordStore
from intake_service.sanitizer import sanitize

from .models import AnalyticsSummary

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def date_key(now: datetime) -> str:
    """UTC calendar day as YYYY-MM-DD."""
    return now.astimezone(timezone.utc).date().isoformat()


def iso_timestamp(now: datetime) -> str:
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_trackable_page(method: str, path: str) -> bool:
    """GET requests for HTML pages only; API calls, data files and assets are skipped."""
    if method != "GET":
        return False
    if path.startswith("/api/") or path.startswith("/data/"):
        return False
    page = page_name(path)
    return page.endswith(".html") or not posixpath.splitext(page)[1]


def page_name(path: str) -> str:
    return "/index.html" if path == "/" else path


# Top-level sections of the analytics document and their JSON types
DOCUMENT_SECTIONS = {
    "pageViews": dict,
    "referrers": list,
    "events": dict,
}


def _corrupt(detail: str, operation: str) -> CorruptDataError:
    return CorruptDataError(f"analytics document {detail}", collection=ANALYTICS, operation=operation)


def check_document(doc: Document, operation: str) -> Document:
    """Fill in missing sections and reject any of the wrong shape.

    Raises CorruptDataError, so a damaged document surfaces like any other
    store failure instead of as an AttributeError from a transform.
    """
    for key, expected in DOCUMENT_SECTIONS.items():
        value = doc.setdefault(key, expected())
        if not isinstance(value, expected):
            raise _corrupt(f"{key} holds {type(value).__name__}, expected {expected.__name__}", operation)

    for day, pages in doc["pageViews"].items():
        if not isinstance(pages, dict):
            raise _corrupt(f"pageViews[{day}] holds {type(pages).__name__}, expected dict", operation)
        for page, count in pages.items():
            if isinstance(count, bool) or not isinstance(count, int):
                raise _corrupt(f"pageViews[{day}][{page}] is not a count", operation)

    for day, items in doc["events"].items():
        if not isinstance(items, list):
            raise _corrupt(f"events[{day}] holds {type(items).__name__}, expected list", operation)
    return doc


def prune_events(events: Dict[str, Any], now: datetime, retention_days: int = 7) -> Dict[str, Any]:
    """Drop event days older than ``retention_days`` before today."""
    cutoff = date_key(now - timedelta(days=retention_days))
    return {day: items for day, items in events.items() if day >= cutoff}


def record_page_view(
    doc: Document,
    page: str,
    referrer: Optional[str],
    now: datetime,
    site_host: str,
    referrer_limit: int = 100,
    retention_days: int = 7,
) -> Document:
    """Count one view of ``page``, remember an external referrer and prune old events."""
    check_document(doc, "track_page_view")
    day_views = doc["pageViews"].setdefault(date_key(now), {})
    day_views[page] = day_views.get(page, 0) + 1

    referrers = doc["referrers"]
    if referrer and not (site_host and site_host in referrer):
        referrers.insert(0, {
            "url": sanitize(referrer, 500),
            "page": sanitize(page, 200),
            "timestamp": iso_timestamp(now),
        })
        del referrers[referrer_limit:]

    doc["events"] = prune_events(doc["events"], now, retention_days)
    return doc


def record_event(
    doc: Document,
    event: str,
    data: Optional[Dict[str, Any]],
    now: datetime,
    retention_days: int = 7,
) -> Document:
    """Append a custom event under today's key and prune old days."""
    check_document(doc, "track_event")
    doc["events"].setdefault(date_key(now), []).append({
        "event": event,
        "data": data or {},
        "timestamp": iso_timestamp(now),
    })
    doc["events"] = prune_events(doc["events"], now, retention_days)
    return doc


def summarize(doc: Document, now: datetime, top_pages: int = 10, recent_referrers: int = 20) -> AnalyticsSummary:
    """Totals, today's views, most viewed pages and latest referrers."""
    check_document(doc, "get_summary")
    today = date_key(now)
    page_views = doc["pageViews"]
    total = 0
    today_total = 0
    page_totals: Dict[str, int] = {}

    for day, pages in page_views.items():
        for page, count in pages.items():
            total += count
            if day == today:
                today_total += count
            page_totals[page] = page_totals.get(page, 0) + count

    ranked = sorted(page_totals.items(), key=lambda item: item[1], reverse=True)[:top_pages]
    return AnalyticsSummary(
        total_views=total,
        today_views=today_total,
        top_pages=[{"page": page, "views": views} for page, views in ranked],
        daily=page_views,
        recent_referrers=doc["referrers"][:recent_referrers],
    )


class AnalyticsService:
    """Reads and updates the analytics document through the record store."""

    def __init__(
        self,
        store: RecordStore,
        site_host: str,
        referrer_limit: int = 100,
        event_retention_days: int = 7,
        top_pages: int = 10,
        recent_referrers: int = 20,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """Initialize the analytics service.

        Args:
            store: Record store holding the analytics document
            site_host: Own host name; referrers containing it are not recorded
            referrer_limit: Maximum referrers kept, newest first
            event_retention_days: Days of custom events kept
            top_pages: Number of pages in the summary ranking
            recent_referrers: Number of referrers in the summary
            clock: Source of the current time
        """
        self.store = store
        self.site_host = site_host
        self.referrer_limit = referrer_limit
        self.event_retention_days = event_retention_days
        self.top_pages = top_pages
        self.recent_referrers = recent_referrers
        self.clock = clock

    def track_page_view(self, page: str, referrer: Optional[str]) -> None:
        """Count a page view. Raises StoreError on failure."""
        now = self.clock()
        self.store.mutate(
            ANALYTICS,
            lambda doc: record_page_view(
                doc, page, referrer, now, self.site_host, self.referrer_limit, self.event_retention_days
            ),
        )

    def track_event(self, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        """Store a custom client event. Raises StoreError on failure."""
        now = self.clock()
        clean_event = sanitize(event, 100)
        clean_data = _sanitize_event_data(data)
        self.store.mutate(
            ANALYTICS,
            lambda doc: record_event(doc, clean_event, clean_data, now, self.event_retention_days),
        )
        logger.debug(f"Tracked event: event={clean_event}")

    def get_summary(self) -> AnalyticsSummary:
        """Aggregate the stored document. Raises StoreError on failure."""
        doc = self.store.read_document(ANALYTICS)
        return summarize(doc, self.clock(), self.top_pages, self.recent_referrers)


def _sanitize_event_data(data: Any) -> Dict[str, Any]:
    """Keep a flat mapping of sanitized strings and plain scalars."""
    if not isinstance(data, dict):
        return {}
    clean: Dict[str, Any] = {}
    for key, value in data.items():
        clean_key = sanitize(key, 100)
        if not clean_key:
            continue
        if isinstance(value, str):
            clean[clean_key] = sanitize(value, 500)
        elif isinstance(value, (bool, int, float)) or value is None:
            clean[clean_key] = value
    return clean
