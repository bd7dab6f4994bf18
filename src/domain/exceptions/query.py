from .base import FeedCacheError


class QueryEngineUnavailable(FeedCacheError):
    """Raised when the relational blob is missing, corrupt or unreadable."""
