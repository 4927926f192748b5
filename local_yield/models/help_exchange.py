"""
Help-exchange postings (community requests for hands-on help).
"""

from sqlalchemy import Column, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from local_yield.models.base import BaseModel, TimestampMixin
from local_yield.models.enums import PostingStatus

__all__ = ["HelpExchangePosting"]


class HelpExchangePosting(BaseModel, TimestampMixin):

    __tablename__ = "help_exchange_postings"

    created_by_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    zip_code = Column(String(10), nullable=False)
    status = Column(
        Enum(PostingStatus, native_enum=False, length=16),
        nullable=False,
        default=PostingStatus.OPEN,
        index=True,
    )

    created_by = relationship("User")
