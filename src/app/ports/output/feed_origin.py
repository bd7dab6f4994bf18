from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class FeedArtifact(str, Enum):
    DATABASE = "database"
    GEOJSON = "geojson"
    HASH = "hash"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    def blob_name(self, key: str) -> str:
        return f"{key}.{self.extension}"


_EXTENSIONS = {
    FeedArtifact.DATABASE: "db",
    FeedArtifact.GEOJSON: "geojson",
    FeedArtifact.HASH: "hash",
}


class IFeedOrigin(ABC):
    """Port for the remote origin serving versioned feed artifacts."""

    @abstractmethod
    async def fetch(self, key: str, artifact: FeedArtifact) -> bytes:
        """Download one artifact; raise NetworkError on transport failures."""
