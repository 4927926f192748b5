"""
ORM models for The Local Yield.

Importing this package registers every table on `Base.metadata`.
"""

from local_yield.models.audit import AdminActionLog, AppendOnlyViolation
from local_yield.models.base import BaseModel, TimestampMixin
from local_yield.models.care import CareBooking
from local_yield.models.catalog import Event, Product
from local_yield.models.geo import ZipCentroid
from local_yield.models.help_exchange import HelpExchangePosting
from local_yield.models.order import Order
from local_yield.models.report import Report
from local_yield.models.review import Review
from local_yield.models.user import User

__all__ = [
    "AdminActionLog",
    "AppendOnlyViolation",
    "BaseModel",
    "TimestampMixin",
    "CareBooking",
    "Event",
    "Product",
    "ZipCentroid",
    "HelpExchangePosting",
    "Order",
    "Report",
    "Review",
    "User",
]
