"""
Repositories for feed sources: products, events and help-exchange postings.

Each "recent" query eagerly loads the owner so the feed can resolve the
owner's ZIP without extra round trips.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from local_yield.models import Event, HelpExchangePosting, Product
from local_yield.models.enums import PostingStatus
from local_yield.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):

    def __init__(self, db: Session):
        super().__init__(Product, db)

    def list_newest(self, limit: int) -> List[Product]:
        return (
            self.db.query(Product)
            .options(joinedload(Product.owner))
            .order_by(Product.created_at.desc())
            .limit(limit)
            .all()
        )

    def search(self, q: Optional[str] = None) -> List[Product]:
        """All products, newest first, optionally matching `q` case-insensitively."""
        query = self.db.query(Product).options(joinedload(Product.owner))
        if q:
            pattern = f"%{q.lower()}%"
            query = query.filter(
                or_(
                    func.lower(Product.title).like(pattern),
                    func.lower(func.coalesce(Product.description, "")).like(pattern),
                    func.lower(func.coalesce(Product.category, "")).like(pattern),
                )
            )
        return query.order_by(Product.created_at.desc()).all()


class EventRepository(BaseRepository[Event]):

    def __init__(self, db: Session):
        super().__init__(Event, db)

    def list_upcoming(self, now: datetime, limit: int) -> List[Event]:
        return (
            self.db.query(Event)
            .options(joinedload(Event.owner))
            .filter(Event.event_date >= now)
            .order_by(Event.event_date.asc())
            .limit(limit)
            .all()
        )


class HelpExchangePostingRepository(BaseRepository[HelpExchangePosting]):

    def __init__(self, db: Session):
        super().__init__(HelpExchangePosting, db)

    def list_open_newest(self, limit: int) -> List[HelpExchangePosting]:
        return (
            self.db.query(HelpExchangePosting)
            .filter(HelpExchangePosting.status == PostingStatus.OPEN)
            .order_by(HelpExchangePosting.created_at.desc())
            .limit(limit)
            .all()
        )
