"""Geographic helpers for map centering and search regions.

Provides the coordinate type used across the service, great-circle
distances, and the lat/lon span that covers a radius in miles.
"""

import math
from dataclasses import dataclass
from typing import Dict, Tuple

METERS_PER_MILE = 1609.344

# 1 degree of latitude is ~69 miles everywhere
MILES_PER_DEGREE_LAT = 69.0

MIN_SPAN_DEGREES = 0.01


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 latitude/longitude pair."""
    lat: float
    lon: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great-circle distance between two points in meters.

    Uses the Haversine formula.

    Args:
        lat1, lon1: First point coordinates in decimal degrees
        lat2, lon2: Second point coordinates in decimal degrees

    Returns:
        Distance in meters
    """
    # Earth's radius in meters
    R = 6371000

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = math.sin(delta_phi / 2) ** 2 + \
        math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return R * c


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in miles."""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon) / METERS_PER_MILE


def span_for_miles(miles: float, latitude: float) -> Tuple[float, float]:
    """Compute the (lat_delta, lon_delta) span in degrees covering a radius.

    Longitude degrees shrink with cos(latitude); both deltas are floored at
    MIN_SPAN_DEGREES so a tiny radius still yields a usable region.

    Args:
        miles: Radius in miles
        latitude: Latitude of the region center in decimal degrees

    Returns:
        (latitude delta, longitude delta) in degrees
    """
    lat_delta = max(miles / MILES_PER_DEGREE_LAT, MIN_SPAN_DEGREES)
    lon_scale = max(math.cos(math.radians(latitude)), MIN_SPAN_DEGREES)
    lon_delta = max(miles / (MILES_PER_DEGREE_LAT * lon_scale), MIN_SPAN_DEGREES)
    return (lat_delta, lon_delta)
