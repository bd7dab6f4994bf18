from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest

from feed_builders import ROUTE_A1, ROUTE_A2, STOP, geojson_bytes
from src.adapters.api.dependencies import get_feed_session
from src.adapters.persistence.sqlalchemy_feed_queries import (
    SqlAlchemyQueryEngineFactory,
)
from src.adapters.storage.local_blob_store import LocalBlobStore
from src.app.ports.output import FeedArtifact
from src.app.services.feed_session import FeedSession, SessionState
from src.app.services.sync_manager import SyncManager
from src.domain.exceptions import NetworkError, QueryEngineUnavailable
from src.main import app


@dataclass(slots=True)
class FakeOrigin:
    artifacts: dict[FeedArtifact, bytes]
    down: bool = False

    async def fetch(self, key: str, artifact: FeedArtifact) -> bytes:
        if self.down:
            raise NetworkError("origin unreachable")
        return self.artifacts[artifact]


def _session(tmp_path: Path, origin: FakeOrigin) -> FeedSession:
    store = LocalBlobStore(base_path=tmp_path / "blobs")
    return FeedSession(
        sync_manager=SyncManager(blob_store=store, origin=origin),
        blob_store=store,
        query_engine_factory=SqlAlchemyQueryEngineFactory(),
    )


@pytest.fixture
def origin(gtfs_db_bytes: bytes) -> FakeOrigin:
    return FakeOrigin(
        artifacts={
            FeedArtifact.HASH: b"hash-1",
            FeedArtifact.DATABASE: gtfs_db_bytes,
            FeedArtifact.GEOJSON: geojson_bytes(ROUTE_A1, ROUTE_A2, STOP),
        }
    )


async def _get(path: str) -> httpx.Response:
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


@pytest.mark.unit
@pytest.mark.anyio
async def test_ready_session_serves_feed_queries(
    tmp_path: Path, origin: FakeOrigin
) -> None:
    session = _session(tmp_path, origin)
    await session.init("SC")
    app.dependency_overrides[get_feed_session] = lambda: session

    try:
        feed = await _get("/feed")
        agencies = await _get("/agencies")
        collection = await _get("/agency-collection")
        a1 = await _get("/agency-collection/agencies/A1")
        missing = await _get("/agency-collection/agencies/nope")
    finally:
        app.dependency_overrides.clear()
        session.close()

    assert feed.status_code == 200
    assert feed.json()["feed_publisher_name"] == "OnTime"

    assert agencies.status_code == 200
    payload = agencies.json()
    assert [a["agency_name"] for a in payload["list"]] == ["Caltrain", "VTA"]
    assert set(payload["map"]) == {"CT", "VTA"}

    assert collection.status_code == 200
    body = collection.json()
    assert len(body["routes"]["features"]) == 2
    assert len(body["stops"]["features"]) == 1
    assert body["stops"]["features"][0]["properties"]["routes"][0]["route_id"] == "22"
    assert body["bounds"]["southwest"] == {"lat": 36.0, "lon": -122.1}
    assert body["bounds"]["northeast"] == {"lat": 37.1, "lon": -121.0}
    assert set(body["bounds_by_agency"]) == {"A1", "A2"}

    assert a1.status_code == 200
    assert a1.json()["routes"]["features"][0]["geometry"]["coordinates"] == [
        [[-122.0, 37.0], [-122.1, 37.1]]
    ]
    assert missing.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_failed_session_answers_503(tmp_path: Path, origin: FakeOrigin) -> None:
    origin.down = True
    session = _session(tmp_path, origin)
    with pytest.raises(NetworkError):
        await session.init("SC")
    assert session.state is SessionState.FAILED

    app.state.feed_session = session
    try:
        resp = await _get("/agencies")
    finally:
        app.state.feed_session = None

    assert resp.status_code == 503
    assert "origin unreachable" in resp.json()["detail"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_health() -> None:
    resp = await _get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@dataclass(slots=True)
class RaisingSession:
    error: Exception

    def feed_info(self):
        raise self.error

    def agencies(self):
        raise self.error

    def agency_collection(self):
        raise self.error


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    ("error", "status"),
    [
        (QueryEngineUnavailable("database closed"), 503),
        (NetworkError("origin unreachable"), 502),
    ],
)
async def test_feed_errors_map_to_json_status(error: Exception, status: int) -> None:
    app.dependency_overrides[get_feed_session] = lambda: RaisingSession(error)
    try:
        resp = await _get("/agencies")
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == status
    assert resp.json() == {"detail": str(error), "error": type(error).__name__}


@pytest.mark.unit
@pytest.mark.anyio
async def test_unexpected_errors_are_hidden_unless_revealed(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    app.dependency_overrides[get_feed_session] = lambda: RaisingSession(
        RuntimeError("secret detail")
    )
    try:
        monkeypatch.delenv("FEED_REVEAL_ERRORS", raising=False)
        hidden = await _get("/feed")
        monkeypatch.setenv("FEED_REVEAL_ERRORS", "true")
        revealed = await _get("/feed")
    finally:
        app.dependency_overrides.clear()

    assert hidden.status_code == 500
    assert hidden.json() == {"detail": "Internal Server Error"}
    assert revealed.json() == {"detail": "secret detail"}
