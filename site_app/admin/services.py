"""
Admin Service

Read-side views over the stored submissions: listings, the combined
dashboard payload and CSV export.
"""

from typing import Any, Dict, List, Optional

from intake_service.record_store import CONTACTS, INVESTORS, LEADS, RecordStore

EXPORTABLE = (LEADS, CONTACTS, INVESTORS)


def _csv_cell(value: Any) -> str:
    text = "" if not value else str(value)
    return '"' + text.replace('"', '""') + '"'


def records_to_csv(records: List[Dict[str, Any]]) -> str:
    """Header row from the first record's keys, every cell quoted."""
    headers = list(records[0].keys())
    lines = [",".join(headers)]
    for row in records:
        lines.append(",".join(_csv_cell(row.get(h)) for h in headers))
    return "\n".join(lines)


class AdminService:
    """Submission listings for the admin dashboard.

    Every method propagates StoreError; the routes decide the response.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def list_records(self, collection: str) -> List[Dict[str, Any]]:
        return self.store.read_all(collection)

    def get_all(self) -> Dict[str, Any]:
        leads = self.store.read_all(LEADS)
        contacts = self.store.read_all(CONTACTS)
        investors = self.store.read_all(INVESTORS)
        return {
            "summary": {
                "leads": len(leads),
                "contacts": len(contacts),
                "investors": len(investors),
                "total": len(leads) + len(contacts) + len(investors),
            },
            "data": {
                "leads": leads,
                "contacts": contacts,
                "investors": investors,
            },
        }

    def export_csv(self, collection: str) -> Optional[str]:
        """CSV text for a collection, or None when it is empty."""
        if collection not in EXPORTABLE:
            raise ValueError(f"Not exportable: {collection}")
        records = self.store.read_all(collection)
        if not records:
            return None
        return records_to_csv(records)
