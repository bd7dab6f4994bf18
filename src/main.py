from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.feed import router as feed_router
from src.adapters.aws import env_bool
from src.domain.exceptions import FeatureIndexError, FeedCacheError, SyncError

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="Transit Feed Cache")
app.include_router(feed_router)


def _status_for(exc: FeedCacheError) -> int:
    # Origin or its data at fault: bad gateway. Local state at fault: unavailable.
    if isinstance(exc, (SyncError, FeatureIndexError)):
        return 502
    return 503


@app.exception_handler(FeedCacheError)
async def feed_cache_error_handler(
    request: Request, exc: FeedCacheError
) -> JSONResponse:
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=_status_for(exc),
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Keep unexpected failures JSON; messages are hidden unless FEED_REVEAL_ERRORS."""

    logger.exception("Unhandled exception", extra={"path": str(request.url.path)})
    if env_bool("FEED_REVEAL_ERRORS", False):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"
    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
