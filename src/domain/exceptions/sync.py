from __future__ import annotations

from .base import FeedCacheError


class SyncError(FeedCacheError):
    """Base exception for dataset synchronization failures."""


class NetworkError(SyncError):
    """Raised when the origin is unreachable or answers with a non-success status."""


class IncompleteTransfer(SyncError):
    """Raised when a transferred artifact was not stored in full."""

    def __init__(self, artifact: str, detail: str | None = None) -> None:
        message = f"Incomplete {artifact} retrieval"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.artifact = artifact
