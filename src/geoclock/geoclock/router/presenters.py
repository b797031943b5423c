from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from ..attendance.model import AttendanceSession
from ..common.datetime_utils import split_local
from ..employees.model import Employee
from ..overtime.model import OvertimeRequest


def employee_to_wire(e: Employee) -> Dict[str, Any]:
    return {
        "employeeId": e.employee_id,
        "name": e.display_name,
        "siteId": e.site_id or "",
        "role": e.role.kind.value,
        "position": e.position,
    }


def session_to_wire(s: AttendanceSession, *, now: datetime, tz: ZoneInfo) -> Dict[str, Any]:
    """Session row in the client's log layout (dates and times split, local timezone).

    Open sessions report the time elapsed so far.
    """
    date_in, time_in = split_local(s.clock_in_at, tz)
    date_out, time_out = split_local(s.clock_out_at, tz)
    duration = s.duration_at(now)
    out = s.clock_out_location
    return {
        "sessionId": s.session_id,
        "staffId": s.employee_id,
        "name": s.display_name,
        "siteId": s.site_id or "",
        "dateIn": date_in,
        "timeIn": time_in,
        "inLat": s.clock_in_location.point.latitude,
        "inLng": s.clock_in_location.point.longitude,
        "dateOut": date_out,
        "timeOut": time_out,
        "outLat": out.point.latitude if out else None,
        "outLng": out.point.longitude if out else None,
        "isOpen": s.is_open,
        "workingHours": duration.hours,
        "workingMinutes": duration.minutes,
        "workingTime": duration.label,
    }


def _iso(value: Optional[datetime], tz: ZoneInfo) -> Optional[str]:
    return value.astimezone(tz).isoformat(timespec="seconds") if value else None


def request_to_wire(r: OvertimeRequest, *, tz: ZoneInfo) -> Dict[str, Any]:
    return {
        "id": r.request_id,
        "staffId": r.employee_id,
        "name": r.display_name,
        "siteId": r.site_id or "",
        "start": _iso(r.interval.start_at, tz),
        "end": _iso(r.interval.end_at, tz),
        "hours": r.interval.hours,
        "reason": r.reason,
        "status": r.status.value,
        "approverName": r.approver_name,
        "decidedAt": _iso(r.decided_at, tz),
        "timestamp": _iso(r.created_at, tz),
    }
