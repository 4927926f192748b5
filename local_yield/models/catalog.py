"""
Catalog models: producer products and local market events.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from local_yield.models.base import BaseModel, TimestampMixin

__all__ = ["Product", "Event"]


class Product(BaseModel, TimestampMixin):
    """Item listed for sale by a producer."""

    __tablename__ = "products"

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    image_url = Column(String(500), nullable=True)

    owner = relationship("User", back_populates="products")


class Event(BaseModel, TimestampMixin):
    """Farm stand, market day or workshop hosted by a producer."""

    __tablename__ = "events"

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    event_date = Column(DateTime, nullable=False, index=True)
    event_hours = Column(String(100), nullable=True)

    owner = relationship("User", back_populates="events")
