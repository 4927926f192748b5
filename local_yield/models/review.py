"""
Review model and its moderation flags.

Visibility matrix (hidden_by_admin wins over everything):

    hidden_by_admin  private_flag  flagged_for_admin  -> state
    True             any           any                   HIDDEN
    False            True          True                  FLAGGED
    False            True          False                 PENDING_APPROVAL
    False            False         any                   PUBLIC

Only PUBLIC reviews appear in public listings. `resolved` records that
the reviewee handled a private complaint; it does not publish.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from local_yield.models.base import BaseModel, TimestampMixin
from local_yield.models.enums import ModerationState, ReviewType

__all__ = ["Review"]


class Review(BaseModel, TimestampMixin):
    """Buyer (or care seeker) feedback about a completed order or booking."""

    __tablename__ = "reviews"

    reviewer_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reviewee_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Producer (market) or caregiver (care) being reviewed",
    )
    type = Column(
        Enum(ReviewType, native_enum=False, length=16),
        nullable=False,
        default=ReviewType.MARKET,
    )
    order_id = Column(
        String(36),
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    care_booking_id = Column(
        String(36),
        ForeignKey("care_bookings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    rating = Column(Integer, nullable=True)
    comment = Column(Text, nullable=False)
    producer_response = Column(Text, nullable=True)

    # Moderation
    private_flag = Column(Boolean, nullable=False, default=True)
    resolved = Column(Boolean, nullable=False, default=False)
    hidden_by_admin = Column(Boolean, nullable=False, default=False)
    flagged_for_admin = Column(Boolean, nullable=False, default=False)
    flagged_at = Column(DateTime, nullable=True)
    flagged_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    admin_guidance = Column(Text, nullable=True)

    reviewer = relationship("User", foreign_keys=[reviewer_id])
    reviewee = relationship("User", foreign_keys=[reviewee_id])

    __table_args__ = (
        UniqueConstraint("reviewer_id", "order_id", name="uq_review_reviewer_order"),
        UniqueConstraint("reviewer_id", "care_booking_id", name="uq_review_reviewer_booking"),
        CheckConstraint(
            "order_id IS NULL OR care_booking_id IS NULL",
            name="ck_review_single_origin",
        ),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_review_rating_range",
        ),
    )

    @property
    def is_public(self) -> bool:
        return not self.private_flag and not self.hidden_by_admin

    @property
    def moderation_state(self) -> ModerationState:
        if self.hidden_by_admin:
            return ModerationState.HIDDEN
        if not self.private_flag:
            return ModerationState.PUBLIC
        if self.flagged_for_admin:
            return ModerationState.FLAGGED
        return ModerationState.PENDING_APPROVAL
