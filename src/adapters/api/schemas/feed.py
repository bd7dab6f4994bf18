from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class BoundingBoxSchema(BaseModel):
    """``southwest``/``northeast`` are null for an empty box."""

    southwest: GeoPointSchema | None = None
    northeast: GeoPointSchema | None = None


class GeometrySchema(BaseModel):
    type: Literal["MultiLineString", "Point"]
    coordinates: list[Any]


class FeatureSchema(BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: GeometrySchema
    properties: dict[str, Any] = {}


class FeatureCollectionSchema(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[FeatureSchema] = []


class AgencyCollectionSchema(BaseModel):
    routes: FeatureCollectionSchema
    routes_by_agency: dict[str, FeatureCollectionSchema] = {}
    stops: FeatureCollectionSchema
    bounds: BoundingBoxSchema
    bounds_by_agency: dict[str, BoundingBoxSchema] = {}


class AgencyRoutesSchema(BaseModel):
    agency_id: str
    routes: FeatureCollectionSchema
    bounds: BoundingBoxSchema


class AgencySchema(BaseModel):
    agency_id: str | None = None
    agency_name: str | None = None
    agency_url: str | None = None
    agency_timezone: str | None = None
    agency_lang: str | None = None
    agency_phone: str | None = None
    agency_fare_url: str | None = None
    agency_email: str | None = None
    extra: dict[str, Any] = {}


class AgencyListSchema(BaseModel):
    """Serialized with the keys ``list`` (sorted by name) and ``map`` (by id)."""

    model_config = ConfigDict(populate_by_name=True)

    agencies: list[AgencySchema] = Field(default_factory=list, alias="list")
    by_id: dict[str, AgencySchema] = Field(default_factory=dict, alias="map")


class FeedInfoSchema(BaseModel):
    feed_publisher_name: str | None = None
    feed_publisher_url: str | None = None
    feed_lang: str | None = None
    default_lang: str | None = None
    feed_start_date: str | None = None
    feed_end_date: str | None = None
    feed_version: str | None = None
    feed_contact_email: str | None = None
    feed_contact_url: str | None = None
    extra: dict[str, Any] = {}


class SyncResultSchema(BaseModel):
    key: str
    status: Literal["up_to_date", "updated"]
    content_hash: str


class SessionSnapshotSchema(BaseModel):
    key: str
    sync: SyncResultSchema
    agency_collection: AgencyCollectionSchema
    feed_info: FeedInfoSchema | None = None
