"""
Admin analytics schemas.
"""

from __future__ import annotations

from local_yield.schemas.common import BaseSchema


class PlatformAnalytics(BaseSchema):
    total_users: int
    total_orders: int
    gmv_cents: int
    total_bookings: int
    reports_pending: int
