"""Great-circle distance between geographic coordinates."""

import math
from collections.abc import Sequence

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres between two lat/lon points in degrees."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push ``a`` just outside [0, 1] near antipodes
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def path_length_km(path: Sequence[Sequence[float]]) -> float:
    """Sum haversine distances along a path of ``(lon, lat[, alt])`` positions."""
    total_km = 0.0
    for i in range(1, len(path)):
        lon1, lat1 = path[i - 1][0], path[i - 1][1]
        lon2, lat2 = path[i][0], path[i][1]
        total_km += haversine_km(lat1, lon1, lat2, lon2)
    return total_km
