from local_yield.services.geo.zip_distance import (
    EARTH_RADIUS_MILES,
    clamp_radius,
    distance_miles,
    haversine_miles,
    normalize_zip,
)

__all__ = [
    "EARTH_RADIUS_MILES",
    "clamp_radius",
    "distance_miles",
    "haversine_miles",
    "normalize_zip",
]
