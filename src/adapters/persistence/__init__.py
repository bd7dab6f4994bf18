from .sqlalchemy_feed_queries import SqlAlchemyFeedQueries, SqlAlchemyQueryEngineFactory

__all__ = [
    "SqlAlchemyFeedQueries",
    "SqlAlchemyQueryEngineFactory",
]
