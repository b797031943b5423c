from __future__ import annotations

from dataclasses import dataclass

from ..common.geo import GeoPoint
from ..core.constants import DEFAULT_SITE_RADIUS_M


@dataclass(frozen=True)
class SiteConfig:
    """Work site reference point and allowed radius (meters)."""

    site_id: str
    latitude: float
    longitude: float
    radius_m: float = DEFAULT_SITE_RADIUS_M
    name: str = ""

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)
