"""
Order schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Union

from pydantic import Field

from local_yield.models.enums import FulfillmentType, OrderStatus, PaymentMethod
from local_yield.schemas.common import BaseSchema


class OrderCreate(BaseSchema):
    product_id: str
    quantity: int = Field(default=1, ge=1, le=100)
    payment_method: PaymentMethod = PaymentMethod.CARD
    fulfillment_type: FulfillmentType = FulfillmentType.PICKUP
    pickup_date: Union[datetime, None] = None


class OrderStatusUpdate(BaseSchema):
    """Raw status string; recognised values are checked by the workflow."""

    status: str = Field(..., min_length=1, max_length=32)


class OrderResponse(BaseSchema):
    id: str
    buyer_id: str
    producer_id: str
    product_id: Union[str, None] = None
    status: OrderStatus
    quantity: int
    total_cents: int
    paid: bool
    via_cash: bool
    fulfillment_type: FulfillmentType
    paid_at: Union[datetime, None] = None
    pickup_date: Union[datetime, None] = None
    pickup_code: Union[str, None] = None
    resolution_window_ends_at: Union[datetime, None] = None
    fulfilled_at: Union[datetime, None] = None
    created_at: datetime
