"""Key-value store contract.

The aggregation store only needs three primitives: read one key, overwrite
one key, delete one key. Nothing is atomic across keys and there is no
listing, so every multi-step update above this layer must tolerate being
interrupted between any two calls.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """The backing store failed a get, set or delete.

    May be transient. Callers can retry the whole operation.
    """

    def __init__(self, operation: str, key: str, reason: str = ""):
        self.operation = operation
        self.key = key
        self.reason = reason
        message = f"Store {operation} failed for key {key!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class KeyValueStore(ABC):
    """Minimal byte-oriented key-value store."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the value stored at ``key``, or None when absent."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Overwrite ``key`` with ``value``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is not an error."""
