from __future__ import annotations

import os
from dataclasses import dataclass

from src.adapters.aws import env_bool
from src.adapters.origin.http_feed_origin import DEFAULT_ORIGIN_URL, HttpFeedOrigin
from src.adapters.persistence.sqlalchemy_feed_queries import (
    SqlAlchemyQueryEngineFactory,
)
from src.adapters.storage import LocalBlobStore, S3BlobStore
from src.app.ports.output import IBlobStore
from src.app.services.feed_session import FeedSession
from src.app.services.sync_manager import SyncManager


@dataclass(frozen=True, slots=True)
class FeedCacheConfig:
    feed_key: str
    origin_url: str
    blob_store: str
    cache_dir: str
    use_pending_marker: bool

    @staticmethod
    def from_env() -> "FeedCacheConfig":
        blob_store = (os.getenv("FEED_BLOB_STORE") or "local").strip().lower()
        if blob_store not in {"local", "s3"}:
            raise RuntimeError(f"Unsupported FEED_BLOB_STORE: {blob_store}")

        return FeedCacheConfig(
            feed_key=(os.getenv("FEED_KEY") or "SC").strip(),
            origin_url=(os.getenv("FEED_ORIGIN_URL") or DEFAULT_ORIGIN_URL).strip(),
            blob_store=blob_store,
            cache_dir=os.getenv("FEED_CACHE_DIR") or "data/feed_cache",
            use_pending_marker=env_bool("FEED_PENDING_MARKER", True),
        )


def build_blob_store(cfg: FeedCacheConfig) -> IBlobStore:
    if cfg.blob_store == "s3":
        return S3BlobStore()
    return LocalBlobStore(base_path=cfg.cache_dir)


def build_feed_session(cfg: FeedCacheConfig | None = None) -> FeedSession:
    """Wire a fresh, uninitialized session from environment configuration."""

    cfg = cfg or FeedCacheConfig.from_env()
    blob_store = build_blob_store(cfg)
    sync_manager = SyncManager(
        blob_store=blob_store,
        origin=HttpFeedOrigin(base_url=cfg.origin_url),
        use_pending_marker=cfg.use_pending_marker,
    )
    return FeedSession(
        sync_manager=sync_manager,
        blob_store=blob_store,
        query_engine_factory=SqlAlchemyQueryEngineFactory(),
    )
