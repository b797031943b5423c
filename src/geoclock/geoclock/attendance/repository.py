from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.geo import Location
from .duration import WorkedDuration
from .model import AttendanceSession


class AttendanceRepository(Protocol):
    def find_open(self, employee_id: str) -> Optional[AttendanceSession]:
        """Most recently opened session without a clock-out, if any."""

        raise NotImplementedError

    def open_session(
        self,
        *,
        employee_id: str,
        display_name: str,
        site_id: Optional[str],
        clock_in_at: datetime,
        location: Location,
    ) -> AttendanceSession:
        """Append a session only if none is open for the employee.

        Raises AlreadyOpenSessionError otherwise; the check and the append are atomic.
        """

        raise NotImplementedError

    def close_session(
        self,
        *,
        session_id: int,
        clock_out_at: datetime,
        location: Location,
        duration: WorkedDuration,
    ) -> Optional[AttendanceSession]:
        """Close a still-open session; None if it is gone or already closed."""

        raise NotImplementedError

    def list_recent(self, employee_id: str, limit: int) -> Sequence[AttendanceSession]:
        """Newest first."""

        raise NotImplementedError
