"""
Care bookings between a care seeker and a caregiver.
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import relationship

from local_yield.models.base import BaseModel, TimestampMixin
from local_yield.models.enums import CareBookingStatus

__all__ = ["CareBooking"]


class CareBooking(BaseModel, TimestampMixin):

    __tablename__ = "care_bookings"

    care_seeker_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    caregiver_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(
        Enum(CareBookingStatus, native_enum=False, length=16),
        nullable=False,
        default=CareBookingStatus.REQUESTED,
        index=True,
    )
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)

    care_seeker = relationship("User", foreign_keys=[care_seeker_id])
    caregiver = relationship("User", foreign_keys=[caregiver_id])
