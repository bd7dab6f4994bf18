from __future__ import annotations

from .base import FeedCacheError


class FeatureIndexError(FeedCacheError):
    """Raised when a geometry feature collection cannot be indexed."""


class UnsupportedGeometry(FeatureIndexError):
    """Raised for geometry types other than MultiLineString and Point."""

    def __init__(self, geometry_type: str | None) -> None:
        super().__init__(f"Unsupported geometry type: {geometry_type!r}")
        self.geometry_type = geometry_type
