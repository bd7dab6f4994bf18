from .base import FeedCacheError
from .indexing import FeatureIndexError, UnsupportedGeometry
from .query import QueryEngineUnavailable
from .session import SessionError, SessionNotReady, SessionStateError
from .storage import BlobNotFound, BlobStoreError, IncompleteWrite, StorageUnsupported
from .sync import IncompleteTransfer, NetworkError, SyncError

__all__ = [
    "BlobNotFound",
    "BlobStoreError",
    "FeatureIndexError",
    "FeedCacheError",
    "IncompleteTransfer",
    "IncompleteWrite",
    "NetworkError",
    "QueryEngineUnavailable",
    "SessionError",
    "SessionNotReady",
    "SessionStateError",
    "StorageUnsupported",
    "SyncError",
    "UnsupportedGeometry",
]
