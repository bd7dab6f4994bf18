from __future__ import annotations

from dataclasses import replace
from functools import reduce
from typing import Any, Iterable, Mapping

from src.domain.exceptions import FeatureIndexError, UnsupportedGeometry
from src.domain.models import (
    AgencyCollection,
    BoundingBox,
    GeoPoint,
    GeometryFeature,
    RouteFeature,
    StopFeature,
)

ROUTE_GEOMETRY = "MultiLineString"
STOP_GEOMETRY = "Point"


def parse_feature(raw: Mapping[str, Any]) -> GeometryFeature:
    """Decode one GeoJSON feature into a route or a stop."""

    if not isinstance(raw, Mapping):
        raise FeatureIndexError(f"Feature must be an object, got {type(raw).__name__}")
    raw_properties = raw.get("properties")
    if raw_properties is not None and not isinstance(raw_properties, Mapping):
        raise FeatureIndexError(
            f"Feature properties must be an object, got {type(raw_properties).__name__}"
        )

    geometry = raw.get("geometry") or {}
    geometry_type = geometry.get("type") if isinstance(geometry, Mapping) else None
    properties = dict(raw_properties or {})
    coordinates = geometry.get("coordinates") if geometry_type else None

    try:
        if geometry_type == ROUTE_GEOMETRY:
            lines = tuple(
                tuple(GeoPoint.from_lon_lat(c) for c in line)
                for line in coordinates or ()
            )
            return RouteFeature(lines=lines, properties=properties)

        if geometry_type == STOP_GEOMETRY:
            routes = tuple(
                dict(r) for r in properties.pop("routes", None) or () if r is not None
            )
            return StopFeature(
                location=GeoPoint.from_lon_lat(coordinates or ()),
                properties=properties,
                routes=routes,
            )
    except (TypeError, ValueError) as exc:
        raise FeatureIndexError(
            f"Invalid {geometry_type} coordinates: {exc}"
        ) from exc

    raise UnsupportedGeometry(geometry_type)


def parse_features(document: Mapping[str, Any]) -> tuple[GeometryFeature, ...]:
    """Decode a GeoJSON FeatureCollection."""

    if not isinstance(document, Mapping) or document.get("type") != "FeatureCollection":
        raise FeatureIndexError("Expected a GeoJSON FeatureCollection")
    return tuple(parse_feature(f) for f in document.get("features") or ())


def _extend_all(box: BoundingBox, points: Iterable[GeoPoint]) -> BoundingBox:
    return reduce(BoundingBox.extend, points, box)


def combine(collection: AgencyCollection, feature: GeometryFeature) -> AgencyCollection:
    """Fold one feature into the collection, returning a new collection.

    Routes extend the global bounds with every coordinate; routes carrying an
    agency_id are also appended to that agency's list and bounds. Routes without
    one stay global only. Stops never contribute to bounds.
    """

    if isinstance(feature, StopFeature):
        return replace(collection, stops=collection.stops + (feature,))

    if not isinstance(feature, RouteFeature):
        raise UnsupportedGeometry(type(feature).__name__)

    points = tuple(feature.coordinates())
    updated = replace(
        collection,
        routes=collection.routes + (feature,),
        bounds=_extend_all(collection.bounds, points),
    )

    agency_id = feature.agency_id
    if agency_id is None:
        return updated

    agency_routes = collection.routes_by_agency.get(agency_id, ())
    agency_bounds = collection.bounds_by_agency.get(agency_id, BoundingBox.empty())
    return replace(
        updated,
        routes_by_agency={
            **collection.routes_by_agency,
            agency_id: agency_routes + (feature,),
        },
        bounds_by_agency={
            **collection.bounds_by_agency,
            agency_id: _extend_all(agency_bounds, points),
        },
    )


def partition(features: Iterable[GeometryFeature]) -> AgencyCollection:
    """Same result as folding ``combine`` over ``features``, in linear time.

    Features are accumulated in mutable builders and frozen once at the end.
    """

    routes: list[RouteFeature] = []
    stops: list[StopFeature] = []
    routes_by_agency: dict[str, list[RouteFeature]] = {}
    bounds = BoundingBox.empty()
    bounds_by_agency: dict[str, BoundingBox] = {}

    for feature in features:
        if isinstance(feature, StopFeature):
            stops.append(feature)
            continue
        if not isinstance(feature, RouteFeature):
            raise UnsupportedGeometry(type(feature).__name__)

        points = tuple(feature.coordinates())
        routes.append(feature)
        bounds = _extend_all(bounds, points)

        agency_id = feature.agency_id
        if agency_id is None:
            continue
        routes_by_agency.setdefault(agency_id, []).append(feature)
        bounds_by_agency[agency_id] = _extend_all(
            bounds_by_agency.get(agency_id, BoundingBox.empty()), points
        )

    return AgencyCollection(
        routes=tuple(routes),
        routes_by_agency={k: tuple(v) for k, v in routes_by_agency.items()},
        stops=tuple(stops),
        bounds=bounds,
        bounds_by_agency=bounds_by_agency,
    )
