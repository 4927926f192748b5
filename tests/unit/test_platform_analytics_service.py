"""Unit tests for PlatformAnalyticsService."""

import pytest

from local_yield.core.exceptions import ForbiddenError
from local_yield.models import Report
from local_yield.models.enums import (
    CareBookingStatus,
    OrderStatus,
    ReportEntityType,
    ReportReason,
    ReportStatus,
)
from local_yield.services.analytics import PlatformAnalyticsService


@pytest.fixture
def service(session_factory) -> PlatformAnalyticsService:
    return PlatformAnalyticsService(session_factory)


class TestPlatformAnalytics:
    """Test cases for the admin rollup."""

    def test_counts_orders_paid_or_settled_once(self, service, make_order, buyer, producer, admin) -> None:
        """Test that totals use paid OR status in {PAID, FULFILLED}."""
        # Arrange
        make_order(buyer, producer, status=OrderStatus.PENDING, paid=True, total_cents=1000)
        make_order(buyer, producer, status=OrderStatus.FULFILLED, paid=True, total_cents=2500)
        make_order(buyer, producer, status=OrderStatus.PENDING, paid=False, total_cents=9999)

        # Act
        analytics = service.get_platform_analytics(admin)

        # Assert
        assert analytics.total_orders == 2
        assert analytics.gmv_cents == 3500

    def test_counts_users_bookings_and_pending_reports(
        self, service, db, buyer, producer, admin, completed_booking
    ) -> None:
        # Arrange
        for status in (ReportStatus.PENDING, ReportStatus.PENDING, ReportStatus.RESOLVED):
            db.add(
                Report(
                    reporter_id=buyer.id,
                    entity_type=ReportEntityType.CAREGIVER,
                    entity_id=producer.id,
                    reason=ReportReason.SPAM,
                    status=status,
                )
            )
        db.commit()

        # Act
        analytics = service.get_platform_analytics(admin)

        # Assert
        assert analytics.total_users == 4  # buyer, producer, admin, caregiver
        assert analytics.total_bookings == 1
        assert analytics.reports_pending == 2
        assert analytics.total_orders == 0
        assert analytics.gmv_cents == 0

    def test_empty_platform(self, service, admin) -> None:
        analytics = service.get_platform_analytics(admin)

        assert analytics.model_dump(by_alias=True) == {
            "totalUsers": 1,
            "totalOrders": 0,
            "gmvCents": 0,
            "totalBookings": 0,
            "reportsPending": 0,
        }

    def test_producer_is_forbidden(self, service, producer) -> None:
        with pytest.raises(ForbiddenError):
            service.get_platform_analytics(producer)
