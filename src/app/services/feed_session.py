from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum

from src.app.ports.output import (
    FeedArtifact,
    IBlobStore,
    IFeedQueries,
    IQueryEngineFactory,
)
from src.app.services.sync_manager import SyncManager
from src.domain.algorithms.feature_index import parse_features, partition
from src.domain.exceptions import FeatureIndexError, SessionNotReady, SessionStateError
from src.domain.models import (
    Agency,
    AgencyCollection,
    AgencyList,
    FeedInfo,
    SyncResult,
)

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    SYNCING = "syncing"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    key: str
    sync: SyncResult
    agency_collection: AgencyCollection
    feed_info: FeedInfo | None
    agencies: AgencyList
    primary_agency: Agency | None


@dataclass(slots=True)
class FeedSession:
    """Single entry point for one dataset session.

    ``init`` syncs the local blobs, indexes the geometry blob and opens the
    relational blob. Once READY, queries are answered from that state; the
    session never re-checks the origin. FAILED is terminal: build a new
    session to retry.
    """

    sync_manager: SyncManager
    blob_store: IBlobStore
    query_engine_factory: IQueryEngineFactory

    state: SessionState = SessionState.UNINITIALIZED
    error: BaseException | None = None
    _snapshot: SessionSnapshot | None = None
    _queries: IFeedQueries | None = None

    async def init(self, key: str) -> SessionSnapshot:
        if self.state is not SessionState.UNINITIALIZED:
            raise SessionStateError(f"Session already {self.state.value}")

        try:
            self.state = SessionState.SYNCING
            sync = await self.sync_manager.ensure_current(key)

            self.state = SessionState.LOADING
            collection = self._load_collection(key)
            self._queries = self.query_engine_factory.open(self.blob_store, key)
            feed_info = self._queries.feed_info()
            agencies = self._queries.agencies()
            primary_agency = self._queries.primary_agency()
        except Exception as exc:
            logger.error(
                "Feed session %s failed while %s: %s", key, self.state.value, exc
            )
            self.state = SessionState.FAILED
            self.error = exc
            self.close()
            raise

        self._snapshot = SessionSnapshot(
            key=key,
            sync=sync,
            agency_collection=collection,
            feed_info=feed_info,
            agencies=agencies,
            primary_agency=primary_agency,
        )
        self.state = SessionState.READY
        logger.info(
            "Feed session %s ready: %d routes, %d stops, %d agencies",
            key,
            len(collection.routes),
            len(collection.stops),
            len(collection.routes_by_agency),
        )
        return self._snapshot

    def _load_collection(self, key: str) -> AgencyCollection:
        raw = self.blob_store.read(FeedArtifact.GEOJSON.blob_name(key))
        try:
            document = json.loads(raw)
        except ValueError as exc:
            raise FeatureIndexError(f"Invalid geojson for {key}: {exc}") from exc
        return partition(parse_features(document))

    def _ready(self) -> SessionSnapshot:
        if self.state is not SessionState.READY or self._snapshot is None:
            raise SessionNotReady(f"Session is {self.state.value}")
        return self._snapshot

    def snapshot(self) -> SessionSnapshot:
        return self._ready()

    def agency_collection(self) -> AgencyCollection:
        return self._ready().agency_collection

    def feed_info(self) -> FeedInfo | None:
        return self._ready().feed_info

    def agencies(self) -> AgencyList:
        return self._ready().agencies

    def primary_agency(self) -> Agency | None:
        return self._ready().primary_agency

    def close(self) -> None:
        if self._queries is not None:
            self._queries.close()
            self._queries = None
