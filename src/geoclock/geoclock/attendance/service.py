from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import now_local
from ..common.geo import Location
from ..core.constants import DEFAULT_RECENT_SESSIONS
from ..core.exceptions import AlreadyOpenSessionError, NoOpenSessionError
from ..employees.service import EmployeeDirectory
from ..sites.geofence import GeofenceValidator
from .duration import worked_duration
from .model import AttendanceSession
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Clock-in / clock-out use cases over the append-only session log.

    Every denial raises a DomainError before anything is written.
    """

    def __init__(
        self,
        sessions: AttendanceRepository,
        directory: EmployeeDirectory,
        geofence: GeofenceValidator,
        *,
        tz: ZoneInfo,
        geofence_on_clock_out: bool = True,
        recent_limit: int = DEFAULT_RECENT_SESSIONS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._sessions = sessions
        self._directory = directory
        self._geofence = geofence
        self._tz = tz
        self._geofence_on_clock_out = bool(geofence_on_clock_out)
        self._recent_limit = int(recent_limit)
        self._clock = clock or (lambda: now_local(tz))

    def _now(self, now: Optional[datetime]) -> datetime:
        if now is None:
            now = self._clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=self._tz)
        return now.astimezone(self._tz)

    def clock_in(self, employee_id: str, location: Location, *, now: Optional[datetime] = None) -> AttendanceSession:
        now = self._now(now)
        employee = self._directory.get(employee_id)
        self._geofence.enforce(employee, location.point, location.accuracy)

        if self._sessions.find_open(employee.employee_id):
            raise AlreadyOpenSessionError()

        # The repository re-checks atomically; a concurrent clock-in loses here.
        session = self._sessions.open_session(
            employee_id=employee.employee_id,
            display_name=employee.display_name,
            site_id=employee.site_id,
            clock_in_at=now,
            location=location,
        )
        logger.info("clock-in %s session=%s at %s", employee.employee_id, session.session_id, now.isoformat())
        return session

    def clock_out(self, employee_id: str, location: Location, *, now: Optional[datetime] = None) -> AttendanceSession:
        now = self._now(now)
        employee = self._directory.get(employee_id)
        if self._geofence_on_clock_out:
            self._geofence.enforce(employee, location.point, location.accuracy)

        open_session = self._sessions.find_open(employee.employee_id)
        if not open_session:
            raise NoOpenSessionError()

        duration = worked_duration(open_session.clock_in_at, now)
        closed = self._sessions.close_session(
            session_id=open_session.session_id,
            clock_out_at=now,
            location=location,
            duration=duration,
        )
        if closed is None:
            # Closed by a concurrent request between the lookup and the update.
            raise NoOpenSessionError()

        logger.info(
            "clock-out %s session=%s worked=%s",
            employee.employee_id,
            closed.session_id,
            duration.label,
        )
        return closed

    def recent_sessions(
        self,
        employee_id: str,
        limit: Optional[int] = None,
        *,
        newest_first: bool = True,
    ) -> List[AttendanceSession]:
        rows = list(self._sessions.list_recent(employee_id, limit or self._recent_limit))
        if not newest_first:
            rows.reverse()
        return rows

    def now(self) -> datetime:
        return self._now(None)
