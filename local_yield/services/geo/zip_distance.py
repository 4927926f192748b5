"""
ZIP normalization, radius clamping and great-circle distance.
"""
from __future__ import annotations

import math
import re
from typing import Optional, Tuple, Union

EARTH_RADIUS_MILES = 3958.76

_ZIP5 = re.compile(r"^\d{5}$")

Coordinates = Tuple[float, float]


def normalize_zip(value: Optional[str]) -> Optional[str]:
    """First five characters of a trimmed ZIP, or None unless they are all digits."""
    if value is None:
        return None
    candidate = str(value).strip()[:5]
    return candidate if _ZIP5.match(candidate) else None


def clamp_radius(
    value: Union[str, float, None],
    default: float,
    minimum: float = 1,
    maximum: float = 150,
) -> float:
    """Radius in miles kept within bounds; missing, zero or unparseable input gives `default`."""
    if value is None:
        return float(default)
    try:
        radius = float(value)
    except (TypeError, ValueError):
        return float(default)
    if math.isnan(radius) or radius == 0:
        return float(default)
    return float(max(minimum, min(maximum, radius)))


def haversine_miles(origin: Coordinates, target: Coordinates) -> float:
    lat1, lng1 = map(math.radians, origin)
    lat2, lng2 = map(math.radians, target)
    d_lat = lat2 - lat1
    d_lng = lng2 - lng1
    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(a))


def distance_miles(origin: Optional[Coordinates], target: Optional[Coordinates]) -> Optional[float]:
    """Rounded distance, or None when either side has no centroid."""
    if origin is None or target is None:
        return None
    return round(haversine_miles(origin, target), 1)
