"""Great-circle distance helpers."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .models import LatLon

EARTH_RADIUS_MILES = 3959.0


def degrees_to_radians(deg: float) -> float:
    return deg * math.pi / 180.0


def haversine_distance_miles(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Return the haversine distance in miles between two lat/lon points.

    The square-root argument is clamped to ``[0, 1]`` so floating-point
    overshoot near antipodal points cannot leave the domain of ``sqrt``.
    """

    sin = math.sin
    cos = math.cos
    lat1_rad = degrees_to_radians(lat1)
    lat2_rad = degrees_to_radians(lat2)
    sin_half_lat = sin(degrees_to_radians(lat2 - lat1) / 2.0)
    sin_half_lon = sin(degrees_to_radians(lon2 - lon1) / 2.0)
    a = sin_half_lat**2 + cos(lat1_rad) * cos(lat2_rad) * sin_half_lon**2
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_MILES * c


def path_distance_miles(points: Sequence[LatLon]) -> float:
    """Return the summed haversine length of a route in miles.

    Vectorised counterpart of folding :func:`haversine_distance_miles` over
    consecutive points; used to re-measure stored routes.
    """

    if len(points) < 2:
        return 0.0
    coords = np.radians(np.asarray(points, dtype=float))
    lat = coords[:, 0]
    lon = coords[:, 1]
    d_lat = np.diff(lat)
    d_lon = np.diff(lon)
    a = (
        np.sin(d_lat / 2.0) ** 2
        + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(d_lon / 2.0) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
    return float(np.sum(EARTH_RADIUS_MILES * c))


__all__ = [
    "EARTH_RADIUS_MILES",
    "degrees_to_radians",
    "haversine_distance_miles",
    "path_distance_miles",
]
