"""
Review repository.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from local_yield.models import Review
from local_yield.repositories.base import BaseRepository


class ReviewRepository(BaseRepository[Review]):

    def __init__(self, db: Session):
        super().__init__(Review, db)

    def find_for_order(self, reviewer_id: str, order_id: str) -> Optional[Review]:
        return self.find_one_by_criteria({"reviewer_id": reviewer_id, "order_id": order_id})

    def find_for_booking(self, reviewer_id: str, care_booking_id: str) -> Optional[Review]:
        return self.find_one_by_criteria({"reviewer_id": reviewer_id, "care_booking_id": care_booking_id})

    def list_public_for_reviewee(self, reviewee_id: str) -> List[Review]:
        return (
            self.db.query(Review)
            .filter(
                Review.reviewee_id == reviewee_id,
                Review.private_flag.is_(False),
                Review.hidden_by_admin.is_(False),
            )
            .order_by(Review.created_at.desc())
            .all()
        )

    def list_pending_for_reviewee(self, reviewee_id: str) -> List[Review]:
        """Private, not hidden; flagged reviews are included."""
        return (
            self.db.query(Review)
            .filter(
                Review.reviewee_id == reviewee_id,
                Review.private_flag.is_(True),
                Review.hidden_by_admin.is_(False),
            )
            .order_by(Review.created_at.desc())
            .all()
        )

    def list_flagged(self) -> List[Review]:
        return (
            self.db.query(Review)
            .filter(Review.flagged_for_admin.is_(True))
            .order_by(Review.flagged_at.desc())
            .all()
        )

    def list_all(self, limit: int = 200) -> List[Review]:
        return self.find_by_criteria({}, limit=limit, order_by=["-created_at"])
