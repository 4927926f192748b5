"""
Review schemas: creation, updates and the moderation views.
"""

from __future__ import annotations

from datetime import datetime
from typing import Union

from pydantic import Field, model_validator

from local_yield.models.enums import ModerationState, ReviewType
from local_yield.schemas.common import BaseSchema

__all__ = [
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResolve",
    "AdminGuidanceUpdate",
    "ReviewResponse",
    "PublicReview",
]


class ReviewCreate(BaseSchema):
    """Buyer review for exactly one completed order or care booking."""

    order_id: Union[str, None] = Field(default=None, description="Market order being reviewed")
    care_booking_id: Union[str, None] = Field(default=None, description="Care booking being reviewed")
    rating: Union[int, None] = Field(default=None, ge=1, le=5, description="Star rating 1-5")
    comment: str = Field(..., min_length=1, max_length=5000)

    @model_validator(mode="after")
    def _single_origin(self) -> "ReviewCreate":
        if bool(self.order_id) == bool(self.care_booking_id):
            raise ValueError("Provide exactly one of orderId or careBookingId")
        return self


class ReviewUpdate(BaseSchema):
    comment: Union[str, None] = Field(default=None, min_length=1, max_length=5000)
    rating: Union[int, None] = Field(default=None, ge=1, le=5)


class ReviewResolve(BaseSchema):
    response: Union[str, None] = Field(default=None, max_length=5000, description="Optional reply to the reviewer")


class AdminGuidanceUpdate(BaseSchema):
    guidance: Union[str, None] = Field(default=None, max_length=5000)


class ReviewResponse(BaseSchema):
    """Full moderation view of a review."""

    id: str
    type: ReviewType
    reviewer_id: str
    reviewee_id: str
    order_id: Union[str, None] = None
    care_booking_id: Union[str, None] = None
    rating: Union[int, None] = None
    comment: str
    producer_response: Union[str, None] = None
    private_flag: bool
    resolved: bool
    hidden_by_admin: bool
    flagged_for_admin: bool
    flagged_at: Union[datetime, None] = None
    flagged_by_id: Union[str, None] = None
    approved_at: Union[datetime, None] = None
    admin_guidance: Union[str, None] = None
    moderation_state: ModerationState
    is_public: bool
    created_at: datetime


class PublicReview(BaseSchema):
    """What anonymous visitors see."""

    id: str
    type: ReviewType
    reviewee_id: str
    rating: Union[int, None] = None
    comment: str
    producer_response: Union[str, None] = None
    reviewer_name: Union[str, None] = None
    created_at: datetime
