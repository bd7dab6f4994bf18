from __future__ import annotations

from abc import ABC, abstractmethod

from src.app.ports.output.blob_store import IBlobStore
from src.domain.models import Agency, AgencyList, FeedInfo


class IFeedQueries(ABC):
    """Read-only accessor over the relational feed dataset."""

    @abstractmethod
    def feed_info(self) -> FeedInfo | None:
        raise NotImplementedError

    @abstractmethod
    def agencies(self) -> AgencyList:
        raise NotImplementedError

    @abstractmethod
    def primary_agency(self) -> Agency | None:
        raise NotImplementedError

    def close(self) -> None:
        return None


class IQueryEngineFactory(ABC):
    """Opens an IFeedQueries against the relational blob of a dataset."""

    @abstractmethod
    def open(self, blob_store: IBlobStore, key: str) -> IFeedQueries:
        """Raise QueryEngineUnavailable if the blob is missing or unreadable."""
