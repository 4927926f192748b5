"""
Base repository with standardized CRUD operations and error handling.

Repositories never commit; the surrounding UnitOfWork owns the
transaction boundary.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from local_yield.core.exceptions import RepositoryError
from local_yield.core.logging import get_logger
from local_yield.db.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add a new entity and flush so generated ids are available.

        IntegrityError is propagated unchanged so callers can map
        uniqueness violations to domain errors.
        """
        try:
            self.db.add(entity)
            self.db.flush()
            return entity
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Create failed for {self.model.__name__}: {e}")
            raise RepositoryError(f"Create failed: {self.model.__name__}") from e

    # ==================== Read Operations ====================

    def get(self, id: Any) -> Optional[ModelType]:
        """Find entity by primary key."""
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by ID failed: {self.model.__name__}") from e

    def get_for_update(self, id: Any) -> Optional[ModelType]:
        """
        Load an entity with a row lock for a read-modify-write.

        Backends without row locks (SQLite) ignore FOR UPDATE and rely on
        their database-level write lock instead.
        """
        try:
            return (
                self.db.query(self.model)
                .filter(self.model.id == id)
                .with_for_update()
                .populate_existing()
                .first()
            )
        except SQLAlchemyError as e:
            raise RepositoryError(f"Locked read failed: {self.model.__name__}") from e

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        skip: int = 0,
        limit: Optional[int] = 100,
        order_by: Optional[List[str]] = None,
    ) -> List[ModelType]:
        """
        Find entities matching criteria.

        Args:
            criteria: Filter criteria as key-value pairs (lists become IN)
            skip: Number of records to skip
            limit: Maximum number of records (None for all)
            order_by: List of fields to order by (prefix with - for desc)
        """
        try:
            query = self.db.query(self.model)

            for key, value in criteria.items():
                column = getattr(self.model, key)
                if isinstance(value, (list, tuple, set)):
                    query = query.filter(column.in_(list(value)))
                else:
                    query = query.filter(column == value)

            for field in order_by or []:
                if field.startswith('-'):
                    query = query.order_by(getattr(self.model, field[1:]).desc())
                else:
                    query = query.order_by(getattr(self.model, field))

            query = query.offset(skip)
            if limit is not None:
                query = query.limit(limit)
            return query.all()

        except SQLAlchemyError as e:
            raise RepositoryError(f"Find by criteria failed: {self.model.__name__}") from e

    def find_one_by_criteria(self, criteria: Dict[str, Any]) -> Optional[ModelType]:
        results = self.find_by_criteria(criteria, limit=1)
        return results[0] if results else None

    def count(self, criteria: Optional[Dict[str, Any]] = None) -> int:
        """Count entities matching simple equality criteria."""
        try:
            query = self.db.query(func.count()).select_from(self.model)
            for key, value in (criteria or {}).items():
                query = query.filter(getattr(self.model, key) == value)
            return int(query.scalar() or 0)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Count failed: {self.model.__name__}") from e

    # ==================== Update Operations ====================

    def update(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """Apply field updates to a loaded entity and flush."""
        try:
            for key, value in data.items():
                setattr(entity, key, value)
            self.db.flush()
            return entity
        except SQLAlchemyError as e:
            raise RepositoryError(f"Update failed: {self.model.__name__}") from e
