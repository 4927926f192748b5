"""
Order and care booking repositories.
"""

from typing import List, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from local_yield.models import CareBooking, Order
from local_yield.models.enums import OrderStatus
from local_yield.repositories.base import BaseRepository

SETTLED_STATUSES = (OrderStatus.PAID, OrderStatus.FULFILLED)


class OrderRepository(BaseRepository[Order]):

    def __init__(self, db: Session):
        super().__init__(Order, db)

    def list_for_producer(self, producer_id: str, limit: int = 100) -> List[Order]:
        return self.find_by_criteria({"producer_id": producer_id}, limit=limit, order_by=["-created_at"])

    def list_for_buyer(self, buyer_id: str, limit: int = 100) -> List[Order]:
        return self.find_by_criteria({"buyer_id": buyer_id}, limit=limit, order_by=["-created_at"])

    def settled_totals(self) -> Tuple[int, int]:
        """
        Count and total of orders that are paid or in a settled status.

        A row matching both conditions is counted once.
        """
        count, total = (
            self.db.query(func.count(Order.id), func.coalesce(func.sum(Order.total_cents), 0))
            .filter(or_(Order.paid.is_(True), Order.status.in_(SETTLED_STATUSES)))
            .one()
        )
        return int(count or 0), int(total or 0)


class CareBookingRepository(BaseRepository[CareBooking]):

    def __init__(self, db: Session):
        super().__init__(CareBooking, db)
