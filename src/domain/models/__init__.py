from .features import (
    AgencyCollection,
    AgencyRoutes,
    GeometryFeature,
    RouteFeature,
    StopFeature,
)
from .feed import (
    Agency,
    AgencyList,
    ContentHash,
    DatasetKey,
    FeedInfo,
    SyncResult,
    SyncStatus,
)
from .geo import BoundingBox, GeoPoint

__all__ = [
    "Agency",
    "AgencyCollection",
    "AgencyList",
    "AgencyRoutes",
    "BoundingBox",
    "ContentHash",
    "DatasetKey",
    "FeedInfo",
    "GeoPoint",
    "GeometryFeature",
    "RouteFeature",
    "StopFeature",
    "SyncResult",
    "SyncStatus",
]
