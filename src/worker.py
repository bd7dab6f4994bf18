from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Any

from src.adapters.api.mappers import (
    agency_collection_to_schema,
    agency_list_to_schema,
    feed_info_to_schema,
    snapshot_to_schema,
)
from src.adapters.config import FeedCacheConfig, build_feed_session
from src.adapters.messaging.session_client import SessionClient
from src.adapters.messaging.session_protocol import (
    AgenciesRequest,
    AgencyCollectionRequest,
    ErrorResponse,
    FeedInfoRequest,
    InitRequest,
    OkResponse,
    decode_request,
    encode,
)
from src.app.services.feed_session import FeedSession

logger = logging.getLogger(__name__)

Envelope = tuple[str, "asyncio.Future[str]"]


@dataclass(slots=True)
class SessionWorker:
    """Owns one FeedSession and answers JSON requests strictly in order.

    Every request yields exactly one response. Because requests are handled one
    at a time, a query sent after ``init`` is answered only once ``init`` has
    resolved.
    """

    session: FeedSession
    inbox: "asyncio.Queue[Envelope | None]" = field(default_factory=asyncio.Queue)

    def client(self) -> SessionClient:
        return SessionClient(inbox=self.inbox)

    async def handle(self, raw: str) -> str:
        try:
            request = decode_request(raw)
        except ValueError as exc:
            return encode(
                ErrorResponse(request_id="", error="InvalidRequest", message=str(exc))
            )

        try:
            payload = await self._dispatch(request)
        except Exception as exc:
            logger.warning(
                "Request %s (%s) failed: %s", request.request_id, request.kind, exc
            )
            return encode(
                ErrorResponse(
                    request_id=request.request_id,
                    error=type(exc).__name__,
                    message=str(exc),
                )
            )
        return encode(OkResponse(request_id=request.request_id, payload=payload))

    async def _dispatch(self, request: Any) -> Any:
        if isinstance(request, InitRequest):
            snapshot = await self.session.init(request.key)
            return snapshot_to_schema(snapshot).model_dump(mode="json", by_alias=True)
        if isinstance(request, AgencyCollectionRequest):
            schema = agency_collection_to_schema(self.session.agency_collection())
            return schema.model_dump(mode="json", by_alias=True)
        if isinstance(request, FeedInfoRequest):
            info = feed_info_to_schema(self.session.feed_info())
            return info.model_dump(mode="json", by_alias=True) if info else None
        if isinstance(request, AgenciesRequest):
            schema = agency_list_to_schema(self.session.agencies())
            return schema.model_dump(mode="json", by_alias=True)
        raise ValueError(f"Unsupported request kind: {request.kind}")

    async def run(self) -> None:
        while True:
            envelope = await self.inbox.get()
            if envelope is None:
                break
            raw, reply = envelope
            response = await self.handle(raw)
            if not reply.done():
                reply.set_result(response)
        self.session.close()

    async def stop(self) -> None:
        await self.inbox.put(None)


async def run_once(cfg: FeedCacheConfig) -> dict[str, Any]:
    worker = SessionWorker(session=build_feed_session(cfg))
    task = asyncio.create_task(worker.run())
    try:
        return await worker.client().init(cfg.feed_key)
    finally:
        await worker.stop()
        await task


def main() -> None:
    logging.basicConfig(
        level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = FeedCacheConfig.from_env()
    snapshot = asyncio.run(run_once(cfg))

    collection = snapshot["agency_collection"]
    logger.info(
        "Feed %s %s (hash %s): %d routes, %d stops, agencies: %s",
        snapshot["key"],
        snapshot["sync"]["status"],
        snapshot["sync"]["content_hash"].strip(),
        len(collection["routes"]["features"]),
        len(collection["stops"]["features"]),
        ", ".join(sorted(collection["routes_by_agency"])) or "-",
    )


if __name__ == "__main__":
    main()
