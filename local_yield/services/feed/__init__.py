from local_yield.services.feed.feed_service import FeedService, proximity_label

__all__ = ["FeedService", "proximity_label"]
