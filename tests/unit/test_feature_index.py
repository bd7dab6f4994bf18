from __future__ import annotations

import time
from functools import reduce

import pytest

from feed_builders import ROUTE_A1, ROUTE_A2, STOP, feature_collection
from src.domain.algorithms.feature_index import (
    combine,
    parse_feature,
    parse_features,
    partition,
)
from src.domain.exceptions import FeatureIndexError, UnsupportedGeometry
from src.domain.models import AgencyCollection, GeoPoint, RouteFeature, StopFeature


def _route(agency_id: str | None, coords: list[list[float]], route_id: str = "R"):
    properties = {"route_id": route_id, "route_color": "#000000"}
    if agency_id is not None:
        properties["agency_id"] = agency_id
    return parse_feature(
        {
            "type": "Feature",
            "geometry": {"type": "MultiLineString", "coordinates": [coords]},
            "properties": properties,
        }
    )


def test_partition_two_agencies_scenario() -> None:
    features = parse_features(feature_collection(ROUTE_A1, ROUTE_A2))
    collection = partition(features)

    a1 = collection.bounds_by_agency["A1"]
    assert a1.southwest == GeoPoint(lat=37.0, lon=-122.1)
    assert a1.northeast == GeoPoint(lat=37.1, lon=-122.0)

    assert collection.bounds.southwest == GeoPoint(lat=36.0, lon=-122.1)
    assert collection.bounds.northeast == GeoPoint(lat=37.1, lon=-121.0)

    assert set(collection.routes_by_agency) == {"A1", "A2"}


def test_partition_empty_input_yields_degenerate_bounds() -> None:
    collection = partition(())

    assert collection.routes == ()
    assert collection.stops == ()
    assert dict(collection.routes_by_agency) == {}
    assert dict(collection.bounds_by_agency) == {}
    assert collection.bounds.is_empty


def test_stops_are_collected_without_bounds_or_agency() -> None:
    collection = partition(parse_features(feature_collection(STOP)))

    assert len(collection.stops) == 1
    stop = collection.stops[0]
    assert isinstance(stop, StopFeature)
    assert stop.stop_id == "S1"
    assert stop.routes == ({"route_id": "22", "agency_id": "A1"},)
    assert "routes" not in stop.properties
    assert collection.bounds.is_empty
    assert dict(collection.routes_by_agency) == {}


def test_route_without_agency_is_global_only() -> None:
    collection = partition([_route(None, [[-120.0, 35.0]])])

    assert len(collection.routes) == 1
    assert dict(collection.routes_by_agency) == {}
    assert collection.bounds.contains(GeoPoint(lat=35.0, lon=-120.0))


def test_partition_completeness_and_relative_order() -> None:
    features = [
        _route("A1", [[-122.0, 37.0]], route_id="1"),
        _route("A2", [[-121.0, 36.0]], route_id="2"),
        parse_feature(STOP),
        _route("A1", [[-122.2, 37.2]], route_id="3"),
        _route(None, [[-120.0, 35.0]], route_id="4"),
    ]
    collection = partition(features)

    assert len(collection.routes) + len(collection.stops) == len(features)
    assert [r.route_id for r in collection.routes_by_agency["A1"]] == ["1", "3"]
    assert [r.route_id for r in collection.routes_by_agency["A2"]] == ["2"]

    # Every route with an agency appears in exactly one per-agency list.
    for route in collection.routes:
        lists = [
            agency_id
            for agency_id, routes in collection.routes_by_agency.items()
            if route in routes
        ]
        assert lists == ([route.agency_id] if route.agency_id else [])


def test_agency_bounds_are_contained_in_global_bounds() -> None:
    features = [
        _route("A1", [[-122.0, 37.0], [-122.4, 37.8]]),
        _route("A2", [[-121.0, 36.0], [-121.5, 36.9]]),
        _route("A1", [[-121.7, 37.4]]),
    ]
    collection = partition(features)

    for agency_id, routes in collection.routes_by_agency.items():
        for route in routes:
            for point in route.coordinates():
                assert collection.bounds_by_agency[agency_id].contains(point)
                assert collection.bounds.contains(point)


def test_partition_result_does_not_depend_on_order() -> None:
    features = [
        _route("A1", [[-122.0, 37.0]], route_id="1"),
        _route("A1", [[-122.1, 37.1]], route_id="2"),
        _route("A2", [[-121.0, 36.0]], route_id="3"),
    ]
    forward = partition(features)
    backward = partition(list(reversed(features)))

    assert forward.bounds == backward.bounds
    assert forward.bounds_by_agency == backward.bounds_by_agency
    assert {
        k: {r.route_id for r in v} for k, v in forward.routes_by_agency.items()
    } == {k: {r.route_id for r in v} for k, v in backward.routes_by_agency.items()}


def test_combine_does_not_mutate_its_input() -> None:
    initial = AgencyCollection.empty()
    route = _route("A1", [[-122.0, 37.0]])

    combined = combine(initial, route)

    assert initial.routes == ()
    assert dict(initial.routes_by_agency) == {}
    assert combined.routes == (route,)


def test_for_agency_returns_routes_and_bounds() -> None:
    collection = partition(parse_features(feature_collection(ROUTE_A1, ROUTE_A2)))

    a2 = collection.for_agency("A2")
    assert a2 is not None
    assert [r.route_id for r in a2.routes] == ["68"]
    assert a2.bounds.southwest == a2.bounds.northeast == GeoPoint(lat=36.0, lon=-121.0)
    assert collection.for_agency("missing") is None


@pytest.mark.parametrize("geometry_type", ["LineString", "Polygon", None])
def test_unsupported_geometry_is_rejected(geometry_type: str | None) -> None:
    geometry = {"type": geometry_type, "coordinates": []} if geometry_type else None
    raw = {
        "type": "Feature",
        "geometry": geometry,
        "properties": {},
    }
    with pytest.raises(UnsupportedGeometry):
        parse_feature(raw)


def test_parse_features_requires_feature_collection() -> None:
    with pytest.raises(FeatureIndexError):
        parse_features({"type": "Feature"})


def test_invalid_coordinates_raise_index_error() -> None:
    raw = {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [500.0, 37.0]},
        "properties": {},
    }
    with pytest.raises(FeatureIndexError):
        parse_feature(raw)


def test_route_feature_accessors() -> None:
    route = parse_feature(ROUTE_A1)

    assert isinstance(route, RouteFeature)
    assert route.route_id == "22"
    assert route.route_color == "#ff0000"
    assert route.agency_id == "A1"
    assert len(list(route.coordinates())) == 2


def test_partition_matches_folding_combine() -> None:
    features = [
        _route("A1", [[-122.0, 37.0], [-122.3, 37.4]], route_id="1"),
        parse_feature(STOP),
        _route(None, [[-120.0, 35.0]], route_id="2"),
        _route("A2", [[-121.0, 36.0]], route_id="3"),
        _route("A1", [[-121.5, 36.5]], route_id="4"),
    ]

    assert partition(features) == reduce(
        combine, features, AgencyCollection.empty()
    )


def test_partition_scales_linearly_with_stop_count() -> None:
    stop = parse_feature(STOP)
    route = _route("A1", [[-122.0, 37.0]])
    features = [stop] * 50_000 + [route] * 5_000

    started = time.perf_counter()
    collection = partition(features)
    elapsed = time.perf_counter() - started

    assert len(collection.stops) == 50_000
    assert len(collection.routes_by_agency["A1"]) == 5_000
    assert elapsed < 1.0


@pytest.mark.parametrize("raw", [None, "Feature", ["Feature"]])
def test_non_object_feature_raises_index_error(raw: object) -> None:
    with pytest.raises(FeatureIndexError):
        parse_features({"type": "FeatureCollection", "features": [raw]})


def test_non_object_properties_raise_index_error() -> None:
    raw = {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [-121.9, 37.3]},
        "properties": [["stop_id", "S1"]],
    }
    with pytest.raises(FeatureIndexError):
        parse_feature(raw)
