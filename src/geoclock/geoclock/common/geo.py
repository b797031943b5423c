from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt
from typing import Optional

from ..core.constants import EARTH_RADIUS_M


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Location:
    """A device fix: point plus the reported accuracy radius (meters), if any."""

    point: GeoPoint
    accuracy: Optional[float] = None


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (haversine).

    NaN inputs propagate as NaN.
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    dphi = radians(lat2 - lat1)
    dlambda = radians(lon2 - lon1)
    a = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(max(0.0, 1 - a)))


def distance_between(a: GeoPoint, b: GeoPoint) -> float:
    return distance_meters(a.latitude, a.longitude, b.latitude, b.longitude)
