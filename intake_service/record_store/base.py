"""
Record Store Interface

The store owns the append-only collections (leads, contacts, investors) and
the single mutable analytics document. Callers depend on this interface; the
file-backed and in-memory implementations are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping

from .errors import UnknownCollectionError

Record = Dict[str, Any]
Document = Dict[str, Any]

LEADS = "leads"
CONTACTS = "contacts"
INVESTORS = "investors"
ANALYTICS = "analytics"

# name -> backing file name
DEFAULT_COLLECTIONS: Mapping[str, str] = {
    LEADS: "leads.json",
    CONTACTS: "contacts.json",
    INVESTORS: "investors.json",
}
DEFAULT_DOCUMENTS: Mapping[str, str] = {
    ANALYTICS: "analytics.json",
}


class RecordStore(ABC):
    """Append-only record collections plus read-modify-write documents."""

    def __init__(
        self,
        collections: Mapping[str, str] = DEFAULT_COLLECTIONS,
        documents: Mapping[str, str] = DEFAULT_DOCUMENTS,
    ):
        overlap = set(collections) & set(documents)
        if overlap:
            raise ValueError(f"Names used as both collection and document: {sorted(overlap)}")
        self.collections = dict(collections)
        self.documents = dict(documents)

    def _check_collection(self, name: str, operation: str) -> None:
        if name not in self.collections:
            raise UnknownCollectionError(f"Unknown collection: {name}", collection=name, operation=operation)

    def _check_document(self, name: str, operation: str) -> None:
        if name not in self.documents:
            raise UnknownCollectionError(f"Unknown document: {name}", collection=name, operation=operation)

    @abstractmethod
    def initialize(self) -> None:
        """Create every missing collection ([]) and document ({})."""

    @abstractmethod
    def read_all(self, collection: str) -> List[Record]:
        """Return the stored records in insertion order.

        A collection that was never written reads as empty. A backing file
        that exists but cannot be parsed raises CorruptDataError.
        """

    @abstractmethod
    def append(self, collection: str, record: Record) -> None:
        """Persist one record at the end of the collection.

        The whole read-modify-write runs under the collection lock. Returning
        normally means the record is durable; any StoreError means it is not.
        """

    @abstractmethod
    def read_document(self, name: str) -> Document:
        """Return the current value of a document ({} if never written)."""

    @abstractmethod
    def mutate(self, name: str, update_fn: Callable[[Document], Document]) -> Document:
        """Replace a document with ``update_fn(current)`` under its lock.

        ``update_fn`` gets a private copy and must return the next document.
        The written value is returned.
        """
