"""
Geospatial helpers for GeoJSON-style points.

Points are stored as {"type": "Point", "coordinates": [longitude, latitude]}.
Longitude comes first; swapping the pair silently moves the issue elsewhere.
"""

import math
from typing import Any, Optional, Tuple

EARTH_RADIUS_METERS = 6371000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)
    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def geojson_coordinates(location: Any) -> Optional[Tuple[float, float]]:
    """
    Read (longitude, latitude) from a stored GeoJSON point.

    Returns None for anything that is not a well-formed Point.
    """
    if not isinstance(location, dict) or location.get("type", "Point") != "Point":
        return None
    coordinates = location.get("coordinates")
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
        return None
    try:
        longitude, latitude = float(coordinates[0]), float(coordinates[1])
    except (TypeError, ValueError):
        return None
    if not (-180 <= longitude <= 180 and -90 <= latitude <= 90):
        return None
    return longitude, latitude
