from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence

from ..common.geo import Location
from ..core.exceptions import AlreadyOpenSessionError
from .duration import WorkedDuration
from .model import AttendanceSession
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Append-only session log guarded by one lock.

    Rows keep insertion order; "most recent" means latest appended.
    """

    def __init__(self):
        self._rows: List[AttendanceSession] = []
        self._lock = threading.Lock()
        self._next_id = 1

    def _find_open_locked(self, employee_id: str) -> Optional[int]:
        for idx in range(len(self._rows) - 1, -1, -1):
            row = self._rows[idx]
            if row.employee_id == employee_id and row.is_open:
                return idx
        return None

    def find_open(self, employee_id: str) -> Optional[AttendanceSession]:
        with self._lock:
            idx = self._find_open_locked(employee_id)
            return self._rows[idx] if idx is not None else None

    def open_session(
        self,
        *,
        employee_id: str,
        display_name: str,
        site_id: Optional[str],
        clock_in_at: datetime,
        location: Location,
    ) -> AttendanceSession:
        with self._lock:
            if self._find_open_locked(employee_id) is not None:
                raise AlreadyOpenSessionError()
            session = AttendanceSession(
                session_id=self._next_id,
                employee_id=employee_id,
                display_name=display_name,
                site_id=site_id,
                clock_in_at=clock_in_at,
                clock_in_location=location,
            )
            self._next_id += 1
            self._rows.append(session)
            return session

    def close_session(
        self,
        *,
        session_id: int,
        clock_out_at: datetime,
        location: Location,
        duration: WorkedDuration,
    ) -> Optional[AttendanceSession]:
        with self._lock:
            for idx, row in enumerate(self._rows):
                if row.session_id != session_id:
                    continue
                if not row.is_open:
                    return None
                closed = replace(row, clock_out_at=clock_out_at, clock_out_location=location, duration=duration)
                self._rows[idx] = closed
                return closed
            return None

    def list_recent(self, employee_id: str, limit: int) -> Sequence[AttendanceSession]:
        with self._lock:
            items = [r for r in reversed(self._rows) if r.employee_id == employee_id]
        return items[: int(limit)]
