"""
User model.

Identity records are owned by the sign-in provider; this service only
reads them to resolve roles, capability flags and the home ZIP.
"""

from sqlalchemy import Boolean, Column, Enum, String
from sqlalchemy.orm import relationship

from local_yield.models.base import BaseModel, TimestampMixin
from local_yield.models.enums import UserRole

__all__ = ["User"]


class User(BaseModel, TimestampMixin):
    """Marketplace member (buyer, producer or admin)."""

    __tablename__ = "users"

    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    role = Column(
        Enum(UserRole, native_enum=False, length=16),
        nullable=False,
        default=UserRole.BUYER,
        index=True,
    )
    zip_code = Column(String(10), nullable=True)

    # Additive per-user capability overrides
    is_buyer = Column(Boolean, nullable=False, default=True)
    is_caregiver = Column(Boolean, nullable=False, default=False)
    is_homestead_owner = Column(Boolean, nullable=False, default=False)

    products = relationship("Product", back_populates="owner")
    events = relationship("Event", back_populates="owner")
