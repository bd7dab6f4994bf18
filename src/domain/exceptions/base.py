class FeedCacheError(Exception):
    """Base exception for feed cache failures."""
