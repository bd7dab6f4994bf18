from __future__ import annotations

import asyncio
import logging

from fastapi import HTTPException, Request

from src.adapters.config import FeedCacheConfig, build_feed_session
from src.app.services.feed_session import FeedSession, SessionState
from src.domain.exceptions import FeedCacheError

logger = logging.getLogger(__name__)


async def get_feed_session(request: Request) -> FeedSession:
    """Return the app's ready session, initializing it on first use.

    The session is built per application (stored on ``app.state``) and never
    re-synced; a FAILED session answers 503 until the app is restarted.
    """

    state = request.app.state
    if getattr(state, "feed_session_lock", None) is None:
        state.feed_session_lock = asyncio.Lock()

    async with state.feed_session_lock:
        session: FeedSession | None = getattr(state, "feed_session", None)
        if session is None:
            cfg = FeedCacheConfig.from_env()
            session = build_feed_session(cfg)
            state.feed_session = session
            try:
                await session.init(cfg.feed_key)
            except FeedCacheError as exc:
                logger.error("Feed session %s unavailable: %s", cfg.feed_key, exc)

    if session.state is not SessionState.READY:
        raise HTTPException(
            status_code=503,
            detail=f"Feed data unavailable: {session.error or session.state.value}",
        )
    return session
