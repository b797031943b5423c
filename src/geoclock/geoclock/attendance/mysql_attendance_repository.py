from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence
from zoneinfo import ZoneInfo

import mysql.connector

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..common.geo import GeoPoint, Location
from ..core.exceptions import AlreadyOpenSessionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .duration import WorkedDuration
from .model import AttendanceSession
from .repository import AttendanceRepository

_COLUMNS = """
    session_id, employee_id, display_name, site_id,
    clock_in_at, clock_in_lat, clock_in_lng, clock_in_accuracy,
    clock_out_at, clock_out_lat, clock_out_lng, clock_out_accuracy,
    worked_seconds
"""


class MySQLAttendanceRepository(AttendanceRepository):
    """Sessions table; ``open_marker`` is a stored generated column that equals
    employee_id while clock_out_at is NULL and carries a UNIQUE index, so a
    second open session for the same employee cannot be inserted.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, tz: ZoneInfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def find_open(self, employee_id: str) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE open_marker=%s
                ORDER BY clock_in_at DESC, session_id DESC
                LIMIT 1
                """,
                (employee_id,),
            )
            r = fetchone(cur)
            return self._to_session(r) if r else None

    def open_session(
        self,
        *,
        employee_id: str,
        display_name: str,
        site_id: Optional[str],
        clock_in_at: datetime,
        location: Location,
    ) -> AttendanceSession:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(
                        employee_id, display_name, site_id,
                        clock_in_at, clock_in_lat, clock_in_lng, clock_in_accuracy
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        employee_id,
                        display_name,
                        site_id,
                        to_utc_naive(clock_in_at),
                        location.point.latitude,
                        location.point.longitude,
                        location.accuracy,
                    ),
                )
                session_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise AlreadyOpenSessionError() from exc
            raise

        return AttendanceSession(
            session_id=session_id,
            employee_id=employee_id,
            display_name=display_name,
            site_id=site_id,
            clock_in_at=clock_in_at,
            clock_in_location=location,
        )

    def close_session(
        self,
        *,
        session_id: int,
        clock_out_at: datetime,
        location: Location,
        duration: WorkedDuration,
    ) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET clock_out_at=%s, clock_out_lat=%s, clock_out_lng=%s, clock_out_accuracy=%s, worked_seconds=%s
                WHERE session_id=%s AND clock_out_at IS NULL
                """,
                (
                    to_utc_naive(clock_out_at),
                    location.point.latitude,
                    location.point.longitude,
                    location.accuracy,
                    int(duration.seconds),
                    int(session_id),
                ),
            )
            if cur.rowcount <= 0:
                return None

            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return self._to_session(r) if r else None

    def list_recent(self, employee_id: str, limit: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE employee_id=%s
                ORDER BY clock_in_at DESC, session_id DESC
                LIMIT %s
                """,
                (employee_id, int(limit)),
            )
            return [self._to_session(r) for r in fetchall(cur)]

    def _to_session(self, r: Dict[str, Any]) -> AttendanceSession:
        clock_out_at = from_utc_naive(r.get("clock_out_at"), self._tz)
        out_location = None
        if clock_out_at is not None:
            out_location = Location(
                GeoPoint(float(r["clock_out_lat"]), float(r["clock_out_lng"])),
                _optional_float(r.get("clock_out_accuracy")),
            )
        worked = r.get("worked_seconds")
        return AttendanceSession(
            session_id=int(r["session_id"]),
            employee_id=str(r["employee_id"]),
            display_name=r["display_name"],
            site_id=r.get("site_id"),
            clock_in_at=from_utc_naive(r["clock_in_at"], self._tz),
            clock_in_location=Location(
                GeoPoint(float(r["clock_in_lat"]), float(r["clock_in_lng"])),
                _optional_float(r.get("clock_in_accuracy")),
            ),
            clock_out_at=clock_out_at,
            clock_out_location=out_location,
            duration=WorkedDuration(int(worked)) if worked is not None else None,
        )


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None
