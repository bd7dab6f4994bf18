from __future__ import annotations

from .base import FeedCacheError


class BlobStoreError(FeedCacheError):
    """Raised when the blob store cannot complete an I/O operation."""


class BlobNotFound(BlobStoreError):
    """Raised when reading a blob that has never been written."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Blob not found: {name}")
        self.name = name


class IncompleteWrite(BlobStoreError):
    """Raised when the committed size differs from the supplied size."""

    def __init__(self, name: str, *, expected: int, committed: int) -> None:
        super().__init__(
            f"Incomplete write of {name}: {committed} of {expected} bytes committed"
        )
        self.name = name
        self.expected = expected
        self.committed = committed


class StorageUnsupported(BlobStoreError):
    """Raised when the durable storage backing the store is unavailable."""
