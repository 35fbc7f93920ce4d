"""
In-memory Record Store

Same contract as the file-backed store without touching disk. Values are
deep-copied on the way in and out so callers never share state with the
store.
"""

import copy
import threading
from typing import Callable, Dict, List, Mapping

from .base import (
    DEFAULT_COLLECTIONS,
    DEFAULT_DOCUMENTS,
    Document,
    Record,
    RecordStore,
)
from .errors import StoreError


class InMemoryRecordStore(RecordStore):
    """Record store kept in process memory."""

    def __init__(
        self,
        collections: Mapping[str, str] = DEFAULT_COLLECTIONS,
        documents: Mapping[str, str] = DEFAULT_DOCUMENTS,
    ):
        super().__init__(collections, documents)
        self._collections: Dict[str, List[Record]] = {}
        self._documents: Dict[str, Document] = {}
        self._locks: Dict[str, threading.Lock] = {
            name: threading.Lock() for name in list(self.collections) + list(self.documents)
        }

    def initialize(self) -> None:
        for name in self.collections:
            with self._locks[name]:
                self._collections.setdefault(name, [])
        for name in self.documents:
            with self._locks[name]:
                self._documents.setdefault(name, {})

    def read_all(self, collection: str) -> List[Record]:
        self._check_collection(collection, "read_all")
        with self._locks[collection]:
            return copy.deepcopy(self._collections.get(collection, []))

    def append(self, collection: str, record: Record) -> None:
        self._check_collection(collection, "append")
        with self._locks[collection]:
            self._collections.setdefault(collection, []).append(copy.deepcopy(record))

    def read_document(self, name: str) -> Document:
        self._check_document(name, "read_document")
        with self._locks[name]:
            return copy.deepcopy(self._documents.get(name, {}))

    def mutate(self, name: str, update_fn: Callable[[Document], Document]) -> Document:
        self._check_document(name, "mutate")
        with self._locks[name]:
            updated = update_fn(copy.deepcopy(self._documents.get(name, {})))
            if not isinstance(updated, dict):
                raise StoreError(
                    f"Update for {name} returned {type(updated).__name__}, expected dict",
                    collection=name,
                    operation="mutate",
                )
            self._documents[name] = copy.deepcopy(updated)
            return updated
