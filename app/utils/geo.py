"""
Great-circle distance helpers.

Point arguments are anything with `lat` and `lng` attributes in degrees.
"""
import math
from typing import Iterable

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(a, b) -> float:
    """Great-circle distance in miles between two points."""
    return EARTH_RADIUS_MILES * _central_angle(a.lat, a.lng, b.lat, b.lng)


def path_length_miles(points: Iterable) -> float:
    """Sum of great-circle legs along an ordered sequence of points."""
    total = 0.0
    previous = None
    for point in points:
        if previous is not None:
            total += haversine_miles(previous, point)
        previous = point
    return total


def _central_angle(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding can push a a hair past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
