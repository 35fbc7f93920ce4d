"""
Record Store Errors

Every failure of the store surfaces as a StoreError subclass so the HTTP
boundary can map it to a single generic failure response.
"""

from typing import Optional


class StoreError(Exception):
    """Base class for record store failures."""

    def __init__(self, message: str, collection: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.collection = collection
        self.operation = operation

    def context(self) -> str:
        """Short key=value context for log lines."""
        return f"collection={self.collection}, operation={self.operation}"


class UnknownCollectionError(StoreError):
    """The name does not refer to a configured collection or document."""


class LockTimeoutError(StoreError):
    """The collection lock could not be acquired within the retry budget."""


class CorruptDataError(StoreError):
    """The backing file exists but does not hold the expected JSON shape."""


class StoreIOError(StoreError):
    """Reading or writing the backing file failed at the OS level."""
