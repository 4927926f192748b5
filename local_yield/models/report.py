"""
User-submitted reports about caregivers, postings or orders.
"""

from sqlalchemy import Column, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from local_yield.models.base import BaseModel, TimestampMixin
from local_yield.models.enums import (
    OrderProblemType,
    ProposedOutcome,
    ReportEntityType,
    ReportReason,
    ReportStatus,
)

__all__ = ["Report"]


class Report(BaseModel, TimestampMixin):

    __tablename__ = "reports"

    reporter_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entity_type = Column(
        Enum(ReportEntityType, native_enum=False, length=32,
             values_callable=lambda enum: [member.value for member in enum]),
        nullable=False,
        index=True,
    )
    entity_id = Column(String(36), nullable=False, index=True)
    reason = Column(
        Enum(ReportReason, native_enum=False, length=32),
        nullable=False,
    )
    details = Column(Text, nullable=True)
    status = Column(
        Enum(ReportStatus, native_enum=False, length=16),
        nullable=False,
        default=ReportStatus.PENDING,
        index=True,
    )

    # Order disputes only
    problem_type = Column(Enum(OrderProblemType, native_enum=False, length=32), nullable=True)
    proposed_outcome = Column(Enum(ProposedOutcome, native_enum=False, length=32), nullable=True)

    reporter = relationship("User")
