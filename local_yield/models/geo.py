"""
ZIP code centroids used for proximity filtering.
"""

from sqlalchemy import Column, Float, String

from local_yield.db.base import Base

__all__ = ["ZipCentroid"]


class ZipCentroid(Base):

    __tablename__ = "zip_centroids"

    zip_code = Column(String(5), primary_key=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<ZipCentroid({self.zip_code}: {self.latitude}, {self.longitude})>"
