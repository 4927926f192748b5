"""
Buyer-facing review endpoints and public review listings.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from local_yield.api import deps
from local_yield.core.rate_limiting import RateLimitPreset
from local_yield.schemas.common import DataResponse
from local_yield.schemas.review import PublicReview, ReviewCreate, ReviewResponse, ReviewUpdate
from local_yield.services.auth import Identity
from local_yield.services.review import ReviewModerationService

router = APIRouter(tags=["Reviews"])


@router.post(
    "/reviews",
    response_model=DataResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.rate_limit(RateLimitPreset.DEFAULT))],
)
def create_review(
    payload: ReviewCreate,
    identity: Identity = Depends(deps.require_auth_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    """Review a fulfilled order or a completed care booking."""
    return DataResponse(data=service.create_review(identity, payload))


@router.patch(
    "/reviews/{review_id}",
    response_model=DataResponse[ReviewResponse],
    dependencies=[Depends(deps.rate_limit(RateLimitPreset.DEFAULT))],
)
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    identity: Identity = Depends(deps.require_auth_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    return DataResponse(data=service.update_review_by_reviewer(review_id, identity, payload))


@router.get("/reviews/public/{reviewee_id}", response_model=DataResponse[List[PublicReview]])
def list_public_reviews(
    reviewee_id: str,
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    return DataResponse(data=service.list_public_reviews(reviewee_id))


@router.get("/orders/{order_id}/review", response_model=DataResponse[Optional[ReviewResponse]])
def get_review_for_order(
    order_id: str,
    identity: Identity = Depends(deps.require_auth_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    """The caller's review of an order, or null when none exists yet."""
    return DataResponse(data=service.get_review_for_order(order_id, identity))
