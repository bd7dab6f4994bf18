from .base import FeedCacheError


class SessionError(FeedCacheError):
    """Base exception for feed session misuse."""


class SessionStateError(SessionError):
    """Raised when a session transition is requested from the wrong state."""


class SessionNotReady(SessionError):
    """Raised when a query is issued before the session is ready."""
