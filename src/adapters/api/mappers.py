from __future__ import annotations

from typing import Iterable

from src.adapters.api.schemas.feed import (
    AgencyCollectionSchema,
    AgencyListSchema,
    AgencyRoutesSchema,
    AgencySchema,
    BoundingBoxSchema,
    FeatureCollectionSchema,
    FeatureSchema,
    FeedInfoSchema,
    GeometrySchema,
    GeoPointSchema,
    SessionSnapshotSchema,
    SyncResultSchema,
)
from src.app.services.feed_session import SessionSnapshot
from src.domain.models import (
    Agency,
    AgencyCollection,
    AgencyList,
    AgencyRoutes,
    BoundingBox,
    FeedInfo,
    GeometryFeature,
    RouteFeature,
    SyncResult,
)


def _point(p) -> GeoPointSchema:
    return GeoPointSchema(lat=p.lat, lon=p.lon)


def bounds_to_schema(box: BoundingBox) -> BoundingBoxSchema:
    if box.southwest is None or box.northeast is None:
        return BoundingBoxSchema()
    return BoundingBoxSchema(
        southwest=_point(box.southwest), northeast=_point(box.northeast)
    )


def feature_to_schema(feature: GeometryFeature) -> FeatureSchema:
    # GeoJSON positions are [lon, lat].
    if isinstance(feature, RouteFeature):
        return FeatureSchema(
            geometry=GeometrySchema(
                type="MultiLineString",
                coordinates=[
                    [[p.lon, p.lat] for p in line] for line in feature.lines
                ],
            ),
            properties=dict(feature.properties),
        )
    return FeatureSchema(
        geometry=GeometrySchema(
            type="Point",
            coordinates=[feature.location.lon, feature.location.lat],
        ),
        properties={
            **feature.properties,
            "routes": [dict(r) for r in feature.routes],
        },
    )


def features_to_schema(
    features: Iterable[GeometryFeature],
) -> FeatureCollectionSchema:
    return FeatureCollectionSchema(features=[feature_to_schema(f) for f in features])


def agency_collection_to_schema(
    collection: AgencyCollection,
) -> AgencyCollectionSchema:
    return AgencyCollectionSchema(
        routes=features_to_schema(collection.routes),
        routes_by_agency={
            agency_id: features_to_schema(routes)
            for agency_id, routes in collection.routes_by_agency.items()
        },
        stops=features_to_schema(collection.stops),
        bounds=bounds_to_schema(collection.bounds),
        bounds_by_agency={
            agency_id: bounds_to_schema(box)
            for agency_id, box in collection.bounds_by_agency.items()
        },
    )


def agency_routes_to_schema(agency_routes: AgencyRoutes) -> AgencyRoutesSchema:
    return AgencyRoutesSchema(
        agency_id=agency_routes.agency_id,
        routes=features_to_schema(agency_routes.routes),
        bounds=bounds_to_schema(agency_routes.bounds),
    )


def agency_to_schema(agency: Agency) -> AgencySchema:
    return AgencySchema(
        agency_id=agency.agency_id,
        agency_name=agency.agency_name,
        agency_url=agency.agency_url,
        agency_timezone=agency.agency_timezone,
        agency_lang=agency.agency_lang,
        agency_phone=agency.agency_phone,
        agency_fare_url=agency.agency_fare_url,
        agency_email=agency.agency_email,
        extra=dict(agency.extra),
    )


def agency_list_to_schema(agencies: AgencyList) -> AgencyListSchema:
    return AgencyListSchema(
        agencies=[agency_to_schema(a) for a in agencies.list],
        by_id={k: agency_to_schema(a) for k, a in agencies.map.items()},
    )


def feed_info_to_schema(info: FeedInfo | None) -> FeedInfoSchema | None:
    if info is None:
        return None
    return FeedInfoSchema(
        feed_publisher_name=info.feed_publisher_name,
        feed_publisher_url=info.feed_publisher_url,
        feed_lang=info.feed_lang,
        default_lang=info.default_lang,
        feed_start_date=info.feed_start_date,
        feed_end_date=info.feed_end_date,
        feed_version=info.feed_version,
        feed_contact_email=info.feed_contact_email,
        feed_contact_url=info.feed_contact_url,
        extra=dict(info.extra),
    )


def sync_result_to_schema(result: SyncResult) -> SyncResultSchema:
    return SyncResultSchema(
        key=result.key, status=result.status.value, content_hash=result.content_hash
    )


def snapshot_to_schema(snapshot: SessionSnapshot) -> SessionSnapshotSchema:
    return SessionSnapshotSchema(
        key=snapshot.key,
        sync=sync_result_to_schema(snapshot.sync),
        agency_collection=agency_collection_to_schema(snapshot.agency_collection),
        feed_info=feed_info_to_schema(snapshot.feed_info),
    )
