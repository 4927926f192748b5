"""
Order status workflow.

    PENDING -> PAID | CANCELED | REFUNDED
    PAID    -> FULFILLED | CANCELED | REFUNDED
    FULFILLED, CANCELED, REFUNDED are terminal

Requesting the current status again is a no-op: timestamps stamped on
entry (`paid_at`, `fulfilled_at`) keep their first value.
"""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Callable, Dict, FrozenSet, List, Optional

from sqlalchemy.orm import Session

from local_yield.config.settings import settings
from local_yield.core.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from local_yield.core.logging import get_logger
from local_yield.core.telemetry import BestEffortTelemetry
from local_yield.models import Order
from local_yield.models.enums import OrderStatus, PaymentMethod, UserRole
from local_yield.repositories import OrderRepository, ProductRepository
from local_yield.schemas.audit import OrderStatusUpdateDetails
from local_yield.schemas.order import OrderCreate, OrderResponse
from local_yield.services.audit import AuditLogService
from local_yield.services.auth import (
    Identity,
    require_auth,
    require_producer_or_admin,
    resolve_capabilities,
)
from local_yield.services.common import UnitOfWork

logger = get_logger(__name__)

VALID_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.CANCELED, OrderStatus.REFUNDED}),
    OrderStatus.PAID: frozenset({OrderStatus.FULFILLED, OrderStatus.CANCELED, OrderStatus.REFUNDED}),
    OrderStatus.FULFILLED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

PICKUP_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PICKUP_CODE_LENGTH = 6


def parse_order_status(value: str) -> OrderStatus:
    try:
        return OrderStatus((value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(status.value for status in OrderStatus)
        raise ValidationError(f"Invalid status. Must be one of: {allowed}", field="status")


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in VALID_TRANSITIONS[current]


def generate_pickup_code() -> str:
    return "".join(secrets.choice(PICKUP_CODE_ALPHABET) for _ in range(PICKUP_CODE_LENGTH))


class OrderStatusService:
    """
    Order creation, lookup and producer/admin status transitions.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        audit_log: Optional[AuditLogService] = None,
        telemetry: Optional[BestEffortTelemetry] = None,
    ) -> None:
        self._session_factory = session_factory
        self._audit = audit_log or AuditLogService(session_factory)
        self._telemetry = telemetry or BestEffortTelemetry()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _get_repo(self, uow: UnitOfWork) -> OrderRepository:
        return uow.get_repo(OrderRepository)

    def _now(self) -> datetime:
        return datetime.utcnow()

    def _to_response(self, order: Order) -> OrderResponse:
        return OrderResponse(
            id=order.id,
            buyer_id=order.buyer_id,
            producer_id=order.producer_id,
            product_id=order.product_id,
            status=order.status,
            quantity=order.quantity,
            total_cents=order.total_cents,
            paid=order.paid,
            via_cash=order.via_cash,
            fulfillment_type=order.fulfillment_type,
            paid_at=order.paid_at,
            pickup_date=order.pickup_date,
            pickup_code=order.pickup_code,
            resolution_window_ends_at=order.resolution_window_ends_at,
            fulfilled_at=order.fulfilled_at,
            created_at=order.created_at,
        )

    # ------------------------------------------------------------------ #
    # Create / read
    # ------------------------------------------------------------------ #
    def create_order(self, buyer: Optional[Identity], data: OrderCreate) -> OrderResponse:
        """
        Place an order for a product.

        Card orders are paid at checkout and start in PAID; cash orders
        start in PENDING and move to PAID through the status workflow.
        """
        buyer = require_auth(buyer)

        with UnitOfWork(self._session_factory) as uow:
            product = uow.get_repo(ProductRepository).get(data.product_id)
            if product is None:
                raise NotFoundError("Product", data.product_id)
            if product.user_id == buyer.id:
                raise ValidationError("You cannot order your own product", field="productId")

            via_cash = data.payment_method == PaymentMethod.CASH
            now = self._now()
            order = Order(
                buyer_id=buyer.id,
                producer_id=product.user_id,
                product_id=product.id,
                status=OrderStatus.PENDING if via_cash else OrderStatus.PAID,
                quantity=data.quantity,
                total_cents=product.price_cents * data.quantity,
                paid=not via_cash,
                paid_at=None if via_cash else now,
                via_cash=via_cash,
                fulfillment_type=data.fulfillment_type,
                pickup_date=data.pickup_date,
                pickup_code=generate_pickup_code(),
            )
            if data.pickup_date is not None:
                order.resolution_window_ends_at = data.pickup_date + timedelta(
                    hours=settings.ORDER_RESOLUTION_WINDOW_HOURS
                )
            self._get_repo(uow).create(order)
            result = self._to_response(order)

        self._telemetry.track("order_created", order_id=result.id, via_cash=result.via_cash)
        return result

    def get_order_for_user(self, order_id: str, identity: Optional[Identity]) -> OrderResponse:
        """Buyer, producer or admin may read an order; others see NotFound."""
        identity = require_auth(identity)

        with UnitOfWork(self._session_factory) as uow:
            order = self._get_repo(uow).get(order_id)
            if order is None:
                raise NotFoundError("Order", order_id)
            is_party = identity.id in (order.buyer_id, order.producer_id)
            if not is_party and not resolve_capabilities(identity).can_admin:
                raise NotFoundError("Order", order_id)
            return self._to_response(order)

    def list_orders_for_producer(self, producer: Optional[Identity]) -> List[OrderResponse]:
        producer = require_producer_or_admin(producer)
        with UnitOfWork(self._session_factory) as uow:
            return [self._to_response(o) for o in self._get_repo(uow).list_for_producer(producer.id)]

    def list_orders_for_buyer(self, buyer: Optional[Identity]) -> List[OrderResponse]:
        buyer = require_auth(buyer)
        with UnitOfWork(self._session_factory) as uow:
            return [self._to_response(o) for o in self._get_repo(uow).list_for_buyer(buyer.id)]

    # ------------------------------------------------------------------ #
    # Status workflow
    # ------------------------------------------------------------------ #
    def update_order_status(
        self,
        order_id: str,
        new_status: str,
        actor: Optional[Identity],
    ) -> OrderResponse:
        """
        Move an order to `new_status`.

        Checks run in order: caller capability, status value, order
        lookup, ownership, transition rules.
        """
        actor = require_producer_or_admin(actor)
        target = parse_order_status(new_status)
        is_admin = resolve_capabilities(actor).can_admin

        with UnitOfWork(self._session_factory) as uow:
            order = self._get_repo(uow).get_for_update(order_id)
            if order is None:
                raise NotFoundError("Order", order_id)
            if order.producer_id != actor.id and not is_admin:
                raise ForbiddenError("Only the order's producer or an admin can update its status")

            current = order.status
            if current == target:
                return self._to_response(order)

            if not can_transition(current, target):
                raise InvalidTransitionError(current.value, target.value)

            now = self._now()
            if current == OrderStatus.PENDING and target == OrderStatus.PAID:
                if not order.via_cash:
                    raise ValidationError(
                        "Card payments are confirmed by the payment processor",
                        field="status",
                    )
                order.paid = True
                order.paid_at = order.paid_at or now
            if target == OrderStatus.FULFILLED and order.fulfilled_at is None:
                order.fulfilled_at = now
            order.status = target

            if actor.role == UserRole.ADMIN:
                self._audit.append(
                    uow,
                    admin_id=actor.id,
                    entity_type="Order",
                    entity_id=order.id,
                    details=OrderStatusUpdateDetails(previous_status=current, new_status=target),
                )

            result = self._to_response(order)

        logger.info(
            f"Order {order_id} moved {current.value} -> {target.value}",
            extra={"order_id": order_id, "actor_id": actor.id},
        )
        self._telemetry.track(
            "order_status_changed",
            order_id=order_id,
            from_status=current.value,
            to_status=target.value,
        )
        return result
