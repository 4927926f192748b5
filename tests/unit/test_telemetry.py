"""Unit tests for best-effort telemetry."""

import logging
from unittest.mock import Mock

from local_yield.core.telemetry import BestEffortTelemetry, InMemoryTelemetrySink


class TestBestEffortTelemetry:
    def test_events_reach_the_sink(self) -> None:
        sink = InMemoryTelemetrySink()

        BestEffortTelemetry(sink).track("review_created", review_id="r-1")

        assert sink.events == [("review_created", {"review_id": "r-1"})]

    def test_sink_failure_is_logged_not_raised(self, caplog) -> None:
        """Test that a failing sink never propagates to the caller."""
        # Arrange
        sink = Mock()
        sink.emit.side_effect = ConnectionError("collector down")

        # Act
        with caplog.at_level(logging.WARNING, logger="local_yield.core.telemetry"):
            BestEffortTelemetry(sink).track("order_created", order_id="o-1")

        # Assert
        sink.emit.assert_called_once_with("order_created", {"order_id": "o-1"})
        assert "collector down" in caplog.text

    def test_failing_sink_does_not_break_workflow(self, session_factory, buyer, product) -> None:
        from local_yield.schemas.order import OrderCreate
        from local_yield.services.order import OrderStatusService

        sink = Mock()
        sink.emit.side_effect = RuntimeError("boom")
        service = OrderStatusService(session_factory, telemetry=BestEffortTelemetry(sink))

        order = service.create_order(buyer, OrderCreate(product_id=product))

        assert order.id
        sink.emit.assert_called_once()
