from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.geo import Location
from .duration import WorkedDuration, worked_duration


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one work session (clock-in row, later closed by clock-out).

    Timestamps are absolute (tz-aware); the wire format splits them into
    date and time strings.
    """

    session_id: int
    employee_id: str
    display_name: str
    site_id: Optional[str]
    clock_in_at: datetime
    clock_in_location: Location
    clock_out_at: Optional[datetime] = None
    clock_out_location: Optional[Location] = None
    duration: Optional[WorkedDuration] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out_at is None

    def duration_at(self, now: datetime) -> WorkedDuration:
        """Stored duration when closed, otherwise time elapsed until ``now``."""
        if self.duration is not None:
            return self.duration
        return worked_duration(self.clock_in_at, self.clock_out_at or now)
