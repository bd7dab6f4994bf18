from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Union

from .geo import BoundingBox, GeoPoint


@dataclass(frozen=True, slots=True)
class RouteFeature:
    """A route drawn as a MultiLineString; properties follow GTFS routes.txt."""

    lines: tuple[tuple[GeoPoint, ...], ...]
    properties: Mapping[str, Any] = field(default_factory=dict)

    @property
    def route_id(self) -> str | None:
        value = self.properties.get("route_id")
        return str(value) if value not in (None, "") else None

    @property
    def route_color(self) -> str | None:
        value = self.properties.get("route_color")
        return str(value) if value not in (None, "") else None

    @property
    def agency_id(self) -> str | None:
        value = self.properties.get("agency_id")
        return str(value) if value not in (None, "") else None

    def coordinates(self) -> Iterator[GeoPoint]:
        for line in self.lines:
            yield from line


@dataclass(frozen=True, slots=True)
class StopFeature:
    """A stop point; ``routes`` lists the routes serving it as produced upstream."""

    location: GeoPoint
    properties: Mapping[str, Any] = field(default_factory=dict)
    routes: tuple[Mapping[str, Any], ...] = ()

    @property
    def stop_id(self) -> str | None:
        value = self.properties.get("stop_id")
        return str(value) if value not in (None, "") else None

    @property
    def stop_name(self) -> str | None:
        value = self.properties.get("stop_name")
        return str(value) if value not in (None, "") else None


GeometryFeature = Union[RouteFeature, StopFeature]


@dataclass(frozen=True, slots=True)
class AgencyRoutes:
    agency_id: str
    routes: tuple[RouteFeature, ...]
    bounds: BoundingBox


@dataclass(frozen=True, slots=True)
class AgencyCollection:
    """Route and stop features partitioned by agency, with aggregated bounds."""

    routes: tuple[RouteFeature, ...] = ()
    routes_by_agency: Mapping[str, tuple[RouteFeature, ...]] = field(
        default_factory=dict
    )
    stops: tuple[StopFeature, ...] = ()
    bounds: BoundingBox = field(default_factory=BoundingBox.empty)
    bounds_by_agency: Mapping[str, BoundingBox] = field(default_factory=dict)

    @staticmethod
    def empty() -> "AgencyCollection":
        return AgencyCollection()

    @property
    def agency_ids(self) -> tuple[str, ...]:
        return tuple(self.routes_by_agency)

    def for_agency(self, agency_id: str) -> AgencyRoutes | None:
        routes = self.routes_by_agency.get(agency_id)
        if routes is None:
            return None
        return AgencyRoutes(
            agency_id=agency_id,
            routes=routes,
            bounds=self.bounds_by_agency.get(agency_id, BoundingBox.empty()),
        )
