"""
ZIP centroid lookups.
"""

from typing import Dict, Iterable, Tuple

from sqlalchemy.orm import Session

from local_yield.models import ZipCentroid
from local_yield.repositories.base import BaseRepository

Coordinates = Tuple[float, float]


class ZipCentroidRepository(BaseRepository[ZipCentroid]):

    def __init__(self, db: Session):
        super().__init__(ZipCentroid, db)

    def get_many(self, zip_codes: Iterable[str]) -> Dict[str, Coordinates]:
        wanted = sorted({z for z in zip_codes if z})
        if not wanted:
            return {}
        rows = self.db.query(ZipCentroid).filter(ZipCentroid.zip_code.in_(wanted)).all()
        return {row.zip_code: (row.latitude, row.longitude) for row in rows}
