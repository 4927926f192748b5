"""
Report repository.
"""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from local_yield.models import Order, Report
from local_yield.models.enums import ReportEntityType, ReportStatus
from local_yield.repositories.base import BaseRepository


class ReportRepository(BaseRepository[Report]):

    def __init__(self, db: Session):
        super().__init__(Report, db)

    def list_filtered(
        self,
        status: Optional[ReportStatus] = None,
        entity_type: Optional[ReportEntityType] = None,
        limit: int = 100,
    ) -> List[Report]:
        criteria = {}
        if status is not None:
            criteria["status"] = status
        if entity_type is not None:
            criteria["entity_type"] = entity_type
        return self.find_by_criteria(criteria, limit=limit, order_by=["-created_at"])

    def page_for_reporter(self, reporter_id: str, skip: int, limit: int) -> Tuple[List[Report], int]:
        query = self.db.query(Report).filter(Report.reporter_id == reporter_id)
        total = query.count()
        items = query.order_by(Report.created_at.desc()).offset(skip).limit(limit).all()
        return items, total

    def page_for_order_producer(self, producer_id: str, skip: int, limit: int) -> Tuple[List[Report], int]:
        """Order reports whose order belongs to the producer."""
        query = (
            self.db.query(Report)
            .join(Order, Order.id == Report.entity_id)
            .filter(
                Report.entity_type == ReportEntityType.ORDER,
                Order.producer_id == producer_id,
            )
        )
        total = query.count()
        items = query.order_by(Report.created_at.desc()).offset(skip).limit(limit).all()
        return items, total
