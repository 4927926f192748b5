from local_yield.services.order.order_status_service import (
    VALID_TRANSITIONS,
    OrderStatusService,
    can_transition,
    parse_order_status,
)

__all__ = ["VALID_TRANSITIONS", "OrderStatusService", "can_transition", "parse_order_status"]
