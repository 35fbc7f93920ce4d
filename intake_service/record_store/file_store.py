"""
File-backed Record Store

One JSON file per collection or document inside ``data_dir``. Every write
goes to a temporary file in the same directory and is renamed over the
target, so readers always see a complete file even though they never take
the lock.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

from .base import (
    DEFAULT_COLLECTIONS,
    DEFAULT_DOCUMENTS,
    Document,
    Record,
    RecordStore,
)
from .errors import CorruptDataError, StoreError, StoreIOError
from .locking import LockRegistry, RetryPolicy

logger = logging.getLogger(__name__)


class JsonFileRecordStore(RecordStore):
    """Record store persisted as flat JSON files."""

    def __init__(
        self,
        data_dir: Path,
        retry_policy: Optional[RetryPolicy] = None,
        collections: Mapping[str, str] = DEFAULT_COLLECTIONS,
        documents: Mapping[str, str] = DEFAULT_DOCUMENTS,
    ):
        """Initialize the store.

        Args:
            data_dir: Directory holding the JSON files
            retry_policy: Lock retry schedule (defaults to 3 retries, 0.1s-1.0s)
            collections: Collection name to file name mapping
            documents: Document name to file name mapping
        """
        super().__init__(collections, documents)
        self.data_dir = Path(data_dir)
        self.locks = LockRegistry(retry_policy or RetryPolicy())

    def path_for(self, name: str) -> Path:
        """Backing file for a collection or document name."""
        filename = self.collections.get(name) or self.documents[name]
        return self.data_dir / filename

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Cannot create data directory {self.data_dir}: {e}", operation="initialize") from e

        for name in self.collections:
            self._initialize_file(name, [])
        for name in self.documents:
            self._initialize_file(name, {})

    def read_all(self, collection: str) -> List[Record]:
        self._check_collection(collection, "read_all")
        return self._load(collection, list, "read_all")

    def append(self, collection: str, record: Record) -> None:
        self._check_collection(collection, "append")
        path = self.path_for(collection)
        with self.locks.hold(path, collection, "append"):
            records = self._load(collection, list, "append")
            records.append(record)
            self._write(collection, records, "append")
        logger.debug(f"Appended record: collection={collection}, count={len(records)}")

    def read_document(self, name: str) -> Document:
        self._check_document(name, "read_document")
        return self._load(name, dict, "read_document")

    def mutate(self, name: str, update_fn: Callable[[Document], Document]) -> Document:
        self._check_document(name, "mutate")
        path = self.path_for(name)
        with self.locks.hold(path, name, "mutate"):
            current = self._load(name, dict, "mutate")
            updated = update_fn(current)
            if not isinstance(updated, dict):
                raise StoreError(
                    f"Update for {name} returned {type(updated).__name__}, expected dict",
                    collection=name,
                    operation="mutate",
                )
            self._write(name, updated, "mutate")
        return updated

    # -------------------------------------------------------------------------
    # File helpers
    # -------------------------------------------------------------------------

    def _initialize_file(self, name: str, empty: Any) -> None:
        path = self.path_for(name)
        if path.exists() and not self._is_legacy_document(name):
            return
        with self.locks.hold(path, name, "initialize"):
            if not path.exists():
                self._write(name, empty, "initialize")
                logger.info(f"Initialized data file: {path}")
            elif self._is_legacy_document(name):
                self._write(name, empty, "initialize")
                logger.info(f"Upgraded legacy empty array to object: {path}")

    def _is_legacy_document(self, name: str) -> bool:
        """Older deployments created documents as an empty JSON array."""
        if name not in self.documents:
            return False
        try:
            return json.loads(self.path_for(name).read_text(encoding="utf-8")) == []
        except (OSError, ValueError):
            return False

    def _load(self, name: str, expected: type, operation: str) -> Any:
        """Read and parse a backing file; a missing file reads as empty."""
        path = self.path_for(name)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return expected()
        except OSError as e:
            raise StoreIOError(f"Cannot read {path.name}: {e}", collection=name, operation=operation) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(
                f"{path.name} is not valid JSON: {e}", collection=name, operation=operation
            ) from e

        # Legacy empty-array documents read as empty objects
        if expected is dict and data == []:
            return {}

        if not isinstance(data, expected):
            raise CorruptDataError(
                f"{path.name} holds {type(data).__name__}, expected {expected.__name__}",
                collection=name,
                operation=operation,
            )
        return data

    def _write(self, name: str, data: Any, operation: str) -> None:
        """Write ``data`` to a temp file, fsync it and rename it into place."""
        path = self.path_for(name)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StoreIOError(f"Cannot write {path.name}: {e}", collection=name, operation=operation) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning(f"Could not remove temp file: {tmp_name}")
