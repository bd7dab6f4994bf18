from .session_client import SessionClient, SessionRequestFailed

__all__ = [
    "SessionClient",
    "SessionRequestFailed",
]
