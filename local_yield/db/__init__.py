from local_yield.db.base import Base
from local_yield.db.session import SessionLocal, engine

__all__ = ["Base", "SessionLocal", "engine"]
