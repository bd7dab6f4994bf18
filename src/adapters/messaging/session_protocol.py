from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class InitRequest(BaseModel):
    kind: Literal["init"] = "init"
    request_id: str
    key: str


class AgencyCollectionRequest(BaseModel):
    kind: Literal["agency_collection"] = "agency_collection"
    request_id: str


class FeedInfoRequest(BaseModel):
    kind: Literal["feed_info"] = "feed_info"
    request_id: str


class AgenciesRequest(BaseModel):
    kind: Literal["agencies"] = "agencies"
    request_id: str


SessionRequest = Annotated[
    Union[InitRequest, AgencyCollectionRequest, FeedInfoRequest, AgenciesRequest],
    Field(discriminator="kind"),
]


class OkResponse(BaseModel):
    kind: Literal["ok"] = "ok"
    request_id: str
    payload: Any = None


class ErrorResponse(BaseModel):
    kind: Literal["error"] = "error"
    request_id: str
    error: str
    message: str


SessionResponse = Annotated[
    Union[OkResponse, ErrorResponse],
    Field(discriminator="kind"),
]

request_adapter: TypeAdapter[SessionRequest] = TypeAdapter(SessionRequest)
response_adapter: TypeAdapter[SessionResponse] = TypeAdapter(SessionResponse)


def encode(message: BaseModel) -> str:
    return message.model_dump_json(by_alias=True)


def decode_request(raw: str | bytes) -> SessionRequest:
    return request_adapter.validate_json(raw)


def decode_response(raw: str | bytes) -> SessionResponse:
    return response_adapter.validate_json(raw)
