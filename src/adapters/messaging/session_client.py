from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from pydantic import BaseModel

from src.adapters.messaging.session_protocol import (
    AgenciesRequest,
    AgencyCollectionRequest,
    ErrorResponse,
    FeedInfoRequest,
    InitRequest,
    decode_response,
    encode,
)


class SessionRequestFailed(Exception):
    """Raised on the caller side when the worker answers with an error."""

    def __init__(self, error: str, message: str) -> None:
        super().__init__(f"{error}: {message}")
        self.error = error
        self.message = message


@dataclass(slots=True)
class SessionClient:
    """Foreground side of the session boundary.

    Requests are JSON-encoded and placed on the worker inbox together with a
    future that receives the JSON-encoded response.
    """

    inbox: "asyncio.Queue[Any]"

    async def call(self, request: BaseModel) -> Any:
        reply: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        await self.inbox.put((encode(request), reply))
        response = decode_response(await reply)
        if isinstance(response, ErrorResponse):
            raise SessionRequestFailed(response.error, response.message)
        return response.payload

    async def init(self, key: str) -> dict[str, Any]:
        """Resolve once the session is ready; this is the one-shot ready signal."""

        return await self.call(InitRequest(request_id=str(uuid4()), key=key))

    async def agency_collection(self) -> dict[str, Any]:
        return await self.call(AgencyCollectionRequest(request_id=str(uuid4())))

    async def feed_info(self) -> dict[str, Any] | None:
        return await self.call(FeedInfoRequest(request_id=str(uuid4())))

    async def agencies(self) -> dict[str, Any]:
        return await self.call(AgenciesRequest(request_id=str(uuid4())))
