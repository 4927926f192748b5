from local_yield.services.analytics.platform_analytics_service import PlatformAnalyticsService

__all__ = ["PlatformAnalyticsService"]
