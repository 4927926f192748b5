"""
Admin action log repository.

Append and query only.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from local_yield.models import AdminActionLog
from local_yield.models.enums import AdminAction
from local_yield.repositories.base import BaseRepository


class AdminActionLogRepository(BaseRepository[AdminActionLog]):

    def __init__(self, db: Session):
        super().__init__(AdminActionLog, db)

    def append(self, entry: AdminActionLog) -> AdminActionLog:
        return self.create(entry)

    def update(self, entity, data):
        raise NotImplementedError("Admin action log is append-only")

    def list_for_entity(self, entity_id: str) -> List[AdminActionLog]:
        return (
            self.db.query(AdminActionLog)
            .filter(AdminActionLog.entity_id == entity_id)
            .order_by(AdminActionLog.created_at.asc())
            .all()
        )

    def list_in_range(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        action: Optional[AdminAction] = None,
        performed_by_id: Optional[str] = None,
        limit: int = 500,
    ) -> List[AdminActionLog]:
        query = self.db.query(AdminActionLog)
        if start is not None:
            query = query.filter(AdminActionLog.created_at >= start)
        if end is not None:
            query = query.filter(AdminActionLog.created_at <= end)
        if action is not None:
            query = query.filter(AdminActionLog.action == action)
        if performed_by_id is not None:
            query = query.filter(AdminActionLog.performed_by_id == performed_by_id)
        return query.order_by(AdminActionLog.created_at.desc()).limit(limit).all()
