"""Database initialization utilities."""
import logging
from typing import Optional

from sqlalchemy.engine import Engine

from local_yield.db.base import Base, import_models
from local_yield.db.session import engine as default_engine

logger = logging.getLogger(__name__)


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Create all tables that do not exist yet.

    Note: This is suitable for development/testing only.
    For production, use migrations instead.
    """
    import_models()
    Base.metadata.create_all(bind=engine or default_engine)
    logger.info("Database tables ensured")


def drop_db(engine: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data!
    """
    import_models()
    Base.metadata.drop_all(bind=engine or default_engine)
    logger.info("All database tables dropped")

