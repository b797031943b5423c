from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import SiteConfig
from .repository import SiteRepository


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_radius_m: float):
        self._conn_factory = conn_factory
        self._default_radius_m = float(default_radius_m)

    def get_by_id(self, site_id: str) -> Optional[SiteConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT site_id, site_name, latitude, longitude, radius_m
                FROM site_config
                WHERE site_id=%s
                """,
                (site_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            radius = r.get("radius_m")
            return SiteConfig(
                site_id=str(r["site_id"]),
                name=r.get("site_name") or "",
                latitude=float(r["latitude"]),
                longitude=float(r["longitude"]),
                # Unset or zero radius falls back to the default.
                radius_m=float(radius) if radius else self._default_radius_m,
            )
