from __future__ import annotations

import math
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from src.geoclock.geoclock.common.geo import GeoPoint, Location
from src.geoclock.geoclock.core.constants import EARTH_RADIUS_M
from src.geoclock.geoclock.employees.memory_employee_repository import InMemoryEmployeeRepository
from src.geoclock.geoclock.employees.model import Employee, FixedSite, Roaming, Supervisor
from src.geoclock.geoclock.sites.memory_site_repository import InMemorySiteRepository
from src.geoclock.geoclock.sites.model import SiteConfig

TZ = ZoneInfo("Asia/Bangkok")

HQ = SiteConfig(site_id="HQ", latitude=13.75, longitude=100.50, radius_m=200.0, name="Head office")
WH2 = SiteConfig(site_id="WH2", latitude=13.80, longitude=100.55, radius_m=150.0, name="Warehouse 2")

METERS_PER_DEGREE = EARTH_RADIUS_M * math.pi / 180


def north_of(site: SiteConfig, meters: float) -> GeoPoint:
    """Point due north of the site centre; haversine along a meridian is exact."""
    return GeoPoint(site.latitude + meters / METERS_PER_DEGREE, site.longitude)


def at(point: GeoPoint, accuracy=None) -> Location:
    return Location(point, accuracy)


def local(year, month, day, hour=0, minute=0, second=0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=TZ)


class FakeClock:
    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta) -> None:
        self.current = self.current + timedelta(**delta)


@pytest.fixture
def sites():
    return InMemorySiteRepository([HQ, WH2])


@pytest.fixture
def employees():
    return InMemoryEmployeeRepository(
        [
            Employee("somchai", "Somchai Jaidee", FixedSite("HQ")),
            Employee("lek", "Lek Warehouse", FixedSite("WH2")),
            Employee("nok", "Nok Srisuk", Roaming()),
            Employee("manee", "Manee Rakdee", Supervisor("HQ")),
            Employee("preecha", "Preecha Boonmee", Supervisor("WH2")),
            Employee("ghost", "Ghost Site", FixedSite("NOWHERE")),
            Employee("retired", "Former Staff", FixedSite("HQ"), is_active=False),
        ]
    )
