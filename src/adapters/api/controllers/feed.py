from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from src.adapters.api.dependencies import get_feed_session
from src.adapters.api.mappers import (
    agency_collection_to_schema,
    agency_list_to_schema,
    agency_routes_to_schema,
    feed_info_to_schema,
)
from src.adapters.api.schemas.feed import (
    AgencyCollectionSchema,
    AgencyListSchema,
    AgencyRoutesSchema,
    FeedInfoSchema,
)
from src.app.services.feed_session import FeedSession

router = APIRouter(tags=["feed"])


@router.get("/feed", response_model=FeedInfoSchema | None)
def get_feed_info(
    session: FeedSession = Depends(get_feed_session),
) -> FeedInfoSchema | None:
    return feed_info_to_schema(session.feed_info())


@router.get("/agencies", response_model=AgencyListSchema)
def list_agencies(
    session: FeedSession = Depends(get_feed_session),
) -> AgencyListSchema:
    return agency_list_to_schema(session.agencies())


@router.get("/agency-collection", response_model=AgencyCollectionSchema)
def get_agency_collection(
    session: FeedSession = Depends(get_feed_session),
) -> AgencyCollectionSchema:
    return agency_collection_to_schema(session.agency_collection())


@router.get(
    "/agency-collection/agencies/{agency_id}", response_model=AgencyRoutesSchema
)
def get_agency_routes(
    agency_id: str,
    session: FeedSession = Depends(get_feed_session),
) -> AgencyRoutesSchema:
    agency_routes = session.agency_collection().for_agency(agency_id)
    if agency_routes is None:
        raise HTTPException(status_code=404, detail="Agency has no routes")
    return agency_routes_to_schema(agency_routes)
