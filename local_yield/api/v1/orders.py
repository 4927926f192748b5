"""
Order placement, lookup and status updates.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from local_yield.api import deps
from local_yield.core.rate_limiting import RateLimitPreset
from local_yield.schemas.common import DataResponse
from local_yield.schemas.order import OrderCreate, OrderResponse, OrderStatusUpdate
from local_yield.services.auth import Identity
from local_yield.services.order import OrderStatusService

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=DataResponse[OrderResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.rate_limit(RateLimitPreset.DEFAULT))],
)
def create_order(
    payload: OrderCreate,
    identity: Identity = Depends(deps.require_auth_identity),
    service: OrderStatusService = Depends(deps.get_order_service),
):
    return DataResponse(data=service.create_order(identity, payload))


@router.get("", response_model=DataResponse[List[OrderResponse]])
def list_my_orders(
    identity: Identity = Depends(deps.require_auth_identity),
    service: OrderStatusService = Depends(deps.get_order_service),
):
    return DataResponse(data=service.list_orders_for_buyer(identity))


@router.get("/{order_id}", response_model=DataResponse[OrderResponse])
def get_order(
    order_id: str,
    identity: Identity = Depends(deps.require_auth_identity),
    service: OrderStatusService = Depends(deps.get_order_service),
):
    return DataResponse(data=service.get_order_for_user(order_id, identity))


@router.patch(
    "/{order_id}/status",
    response_model=DataResponse[OrderResponse],
    dependencies=[Depends(deps.rate_limit(RateLimitPreset.DEFAULT))],
)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    identity: Identity = Depends(deps.require_producer_or_admin_identity),
    service: OrderStatusService = Depends(deps.get_order_service),
):
    """Move the order through PENDING, PAID, FULFILLED, CANCELED or REFUNDED."""
    return DataResponse(data=service.update_order_status(order_id, payload.status, identity))
