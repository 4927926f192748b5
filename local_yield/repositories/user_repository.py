"""
User repository.
"""

from typing import Optional

from sqlalchemy.orm import Session

from local_yield.models import User
from local_yield.models.enums import UserRole
from local_yield.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):

    def __init__(self, db: Session):
        super().__init__(User, db)

    def first_with_role(self, role: UserRole) -> Optional[User]:
        """Earliest-created user holding the role."""
        return (
            self.db.query(User)
            .filter(User.role == role)
            .order_by(User.created_at.asc(), User.id.asc())
            .first()
        )
