from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lon}")

    @staticmethod
    def from_lon_lat(coordinate: "list[float] | tuple[float, ...]") -> "GeoPoint":
        """Build a point from a GeoJSON position (longitude first)."""

        if len(coordinate) < 2:
            raise ValueError(f"Invalid position: {coordinate!r}")
        return GeoPoint(lat=float(coordinate[1]), lon=float(coordinate[0]))


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned geographic box.

    The empty box (both corners ``None``) has no extent until extended.
    """

    southwest: GeoPoint | None = None
    northeast: GeoPoint | None = None

    def __post_init__(self) -> None:
        if (self.southwest is None) != (self.northeast is None):
            raise ValueError("BoundingBox corners must be both set or both empty")
        if self.southwest is not None and self.northeast is not None:
            if (
                self.southwest.lat > self.northeast.lat
                or self.southwest.lon > self.northeast.lon
            ):
                raise ValueError("BoundingBox southwest must not exceed northeast")

    @staticmethod
    def empty() -> "BoundingBox":
        return BoundingBox()

    @property
    def is_empty(self) -> bool:
        return self.southwest is None

    def contains(self, point: GeoPoint) -> bool:
        if self.southwest is None or self.northeast is None:
            return False
        return (
            self.southwest.lat <= point.lat <= self.northeast.lat
            and self.southwest.lon <= point.lon <= self.northeast.lon
        )

    def extend(self, point: GeoPoint) -> "BoundingBox":
        return extend(self, point)

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return union(self, other)


def extend(box: BoundingBox, point: GeoPoint) -> BoundingBox:
    """Smallest box containing both ``box`` and ``point``."""

    if box.southwest is None or box.northeast is None:
        return BoundingBox(southwest=point, northeast=point)
    if box.contains(point):
        return box
    return BoundingBox(
        southwest=GeoPoint(
            lat=min(box.southwest.lat, point.lat),
            lon=min(box.southwest.lon, point.lon),
        ),
        northeast=GeoPoint(
            lat=max(box.northeast.lat, point.lat),
            lon=max(box.northeast.lon, point.lon),
        ),
    )


def union(a: BoundingBox, b: BoundingBox) -> BoundingBox:
    if b.southwest is None or b.northeast is None:
        return a
    return extend(extend(a, b.southwest), b.northeast)
