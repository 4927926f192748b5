"""
Platform analytics service.

Admin-only read rollup across users, orders, care bookings and reports.
"""

from typing import Callable, Optional

from sqlalchemy.orm import Session

from local_yield.core.logging import get_logger, log_execution_time
from local_yield.models.enums import ReportStatus
from local_yield.repositories import (
    CareBookingRepository,
    OrderRepository,
    ReportRepository,
    UserRepository,
)
from local_yield.schemas.analytics import PlatformAnalytics
from local_yield.services.auth import Identity, require_admin
from local_yield.services.common import UnitOfWork

logger = get_logger(__name__)


class PlatformAnalyticsService:
    """
    Service for platform-wide analytics.

    Provides:
    - User and care booking totals
    - Settled order count and gross merchandise value
    - Pending report backlog
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @log_execution_time(__name__)
    def get_platform_analytics(self, admin: Optional[Identity]) -> PlatformAnalytics:
        """
        An order counts towards `total_orders` and `gmv_cents` when it is
        paid or its status is PAID or FULFILLED; either condition is
        enough and no order is counted twice.
        """
        require_admin(admin)

        with UnitOfWork(self._session_factory, auto_commit=False) as uow:
            total_orders, gmv_cents = uow.get_repo(OrderRepository).settled_totals()
            analytics = PlatformAnalytics(
                total_users=uow.get_repo(UserRepository).count(),
                total_orders=total_orders,
                gmv_cents=gmv_cents,
                total_bookings=uow.get_repo(CareBookingRepository).count(),
                reports_pending=uow.get_repo(ReportRepository).count({"status": ReportStatus.PENDING}),
            )

        logger.debug("Platform analytics computed", extra=analytics.model_dump())
        return analytics
