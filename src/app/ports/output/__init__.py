from .blob_store import IBlobStore
from .feed_origin import FeedArtifact, IFeedOrigin
from .feed_queries import IFeedQueries, IQueryEngineFactory

__all__ = [
    "FeedArtifact",
    "IBlobStore",
    "IFeedOrigin",
    "IFeedQueries",
    "IQueryEngineFactory",
]
