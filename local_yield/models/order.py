"""
Order model.

`fulfilled_at` is stamped when the order enters FULFILLED and is never
recomputed afterwards.
"""

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from local_yield.models.base import BaseModel, TimestampMixin
from local_yield.models.enums import FulfillmentType, OrderStatus

__all__ = ["Order"]


class Order(BaseModel, TimestampMixin):

    __tablename__ = "orders"

    buyer_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    producer_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        String(36),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status = Column(
        Enum(OrderStatus, native_enum=False, length=16),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    quantity = Column(Integer, nullable=False, default=1)
    total_cents = Column(Integer, nullable=False, default=0)

    # Payment: card orders are paid up front, cash orders at pickup
    paid = Column(Boolean, nullable=False, default=False)
    via_cash = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime, nullable=True)

    fulfillment_type = Column(
        Enum(FulfillmentType, native_enum=False, length=16),
        nullable=False,
        default=FulfillmentType.PICKUP,
    )

    pickup_date = Column(DateTime, nullable=True)
    pickup_code = Column(String(6), nullable=True)
    resolution_window_ends_at = Column(DateTime, nullable=True)
    fulfilled_at = Column(DateTime, nullable=True)

    buyer = relationship("User", foreign_keys=[buyer_id])
    producer = relationship("User", foreign_keys=[producer_id])
    product = relationship("Product")
