import math
from enum import Enum
from typing import Iterable


class DistanceUnit(str, Enum):
    KILOMETERS = "km"
    MILES = "mi"
    METERS = "m"


EARTH_RADIUS = {
    DistanceUnit.KILOMETERS: 6371.0,
    DistanceUnit.MILES: 3958.8,
    DistanceUnit.METERS: 6371000.0,
}


def haversine(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    unit: DistanceUnit = DistanceUnit.KILOMETERS,
) -> float:
    """Great-circle distance between two points, in the requested unit."""
    radius = EARTH_RADIUS[DistanceUnit(unit)]
    lat1, lng1, lat2, lng2 = map(math.radians, [lat1, lng1, lat2, lng2])
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * radius * math.asin(math.sqrt(min(a, 1.0)))


def path_distance(
    points: Iterable[tuple[float, float]],
    unit: DistanceUnit = DistanceUnit.KILOMETERS,
) -> float:
    """Sum of leg distances along a sequence of (lat, lng) points."""
    total = 0.0
    prev = None
    for lat, lng in points:
        if prev is not None:
            total += haversine(prev[0], prev[1], lat, lng, unit)
        prev = (lat, lng)
    return total


def to_lnglat(points: Iterable[tuple[float, float]]) -> list[list[float]]:
    """Convert (lat, lng) pairs to GeoJSON [lng, lat] coordinates."""
    return [[lng, lat] for lat, lng in points]
