from local_yield.services.review.review_moderation_service import ReviewModerationService

__all__ = ["ReviewModerationService"]
