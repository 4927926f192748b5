"""
Producer dashboard: review moderation and incoming orders.
"""
from typing import List

from fastapi import APIRouter, Depends

from local_yield.api import deps
from local_yield.core.rate_limiting import RateLimitPreset
from local_yield.schemas.common import DataResponse
from local_yield.schemas.order import OrderResponse
from local_yield.schemas.review import ReviewResolve, ReviewResponse
from local_yield.services.auth import Identity
from local_yield.services.order import OrderStatusService
from local_yield.services.review import ReviewModerationService

router = APIRouter(prefix="/dashboard", tags=["Producer Dashboard"])

_limited = [Depends(deps.rate_limit(RateLimitPreset.DEFAULT))]


@router.get("/reviews", response_model=DataResponse[List[ReviewResponse]])
def list_pending_reviews(
    identity: Identity = Depends(deps.require_producer_or_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    """Reviews about the caller awaiting approval, flagged ones included."""
    return DataResponse(data=service.list_pending_for_producer(identity))


@router.post(
    "/reviews/{review_id}/approve",
    response_model=DataResponse[ReviewResponse],
    dependencies=_limited,
)
def approve_review(
    review_id: str,
    identity: Identity = Depends(deps.require_producer_or_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    return DataResponse(data=service.approve_review_by_producer(review_id, identity))


@router.post(
    "/reviews/{review_id}/flag",
    response_model=DataResponse[ReviewResponse],
    dependencies=_limited,
)
def flag_review(
    review_id: str,
    identity: Identity = Depends(deps.require_producer_or_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    return DataResponse(data=service.flag_review_by_producer(review_id, identity))


@router.post(
    "/reviews/{review_id}/resolve",
    response_model=DataResponse[ReviewResponse],
    dependencies=_limited,
)
def resolve_review(
    review_id: str,
    payload: ReviewResolve,
    identity: Identity = Depends(deps.require_producer_or_admin_identity),
    service: ReviewModerationService = Depends(deps.get_review_service),
):
    return DataResponse(data=service.resolve_review_by_producer(review_id, identity, payload.response))


@router.get("/orders", response_model=DataResponse[List[OrderResponse]])
def list_incoming_orders(
    identity: Identity = Depends(deps.require_producer_or_admin_identity),
    service: OrderStatusService = Depends(deps.get_order_service),
):
    return DataResponse(data=service.list_orders_for_producer(identity))
