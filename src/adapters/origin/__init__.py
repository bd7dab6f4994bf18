from .http_feed_origin import HttpFeedOrigin

__all__ = ["HttpFeedOrigin"]
