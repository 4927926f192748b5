"""SQLAlchemy Base class for all models."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def import_models() -> None:
    """Import all models so their tables are registered on Base.metadata."""
    import local_yield.models  # noqa: F401
