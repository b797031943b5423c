from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import OvertimeInterval, OvertimeRequest
from .repository import OvertimeRepository

_COLUMNS = """
    request_id, employee_id, display_name, site_id, start_at, end_at,
    reason, status, approver_name, decided_at, created_at
"""


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: ZoneInfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def add(self, request: OvertimeRequest) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_requests(
                    request_id, employee_id, display_name, site_id, start_at, end_at, reason, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.request_id,
                    request.employee_id,
                    request.display_name,
                    request.site_id,
                    to_utc_naive(request.interval.start_at),
                    to_utc_naive(request.interval.end_at),
                    request.reason,
                    request.status.value,
                    to_utc_naive(request.created_at),
                ),
            )

    def get(self, request_id: str) -> Optional[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM overtime_requests WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            return self._to_request(r) if r else None

    def decide(
        self,
        *,
        request_id: str,
        status: RequestStatus,
        approver_name: str,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_requests
                SET status=%s, approver_name=%s, decided_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    approver_name,
                    to_utc_naive(decided_at),
                    request_id,
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_for_employee(self, employee_id: str, *, limit: int) -> Sequence[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_requests
                WHERE employee_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (employee_id, int(limit)),
            )
            return [self._to_request(r) for r in fetchall(cur)]

    def list_for_supervisor(self, site_id: Optional[str], *, limit: int) -> Sequence[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_requests
                WHERE site_id=%s OR status=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (site_id, RequestStatus.PENDING.value, int(limit)),
            )
            return [self._to_request(r) for r in fetchall(cur)]

    def _to_request(self, r: Dict[str, Any]) -> OvertimeRequest:
        return OvertimeRequest(
            request_id=str(r["request_id"]),
            employee_id=str(r["employee_id"]),
            display_name=r["display_name"],
            site_id=r.get("site_id"),
            interval=OvertimeInterval(
                start_at=from_utc_naive(r["start_at"], self._tz),
                end_at=from_utc_naive(r["end_at"], self._tz),
            ),
            reason=r.get("reason") or "",
            status=RequestStatus(r["status"]),
            created_at=from_utc_naive(r["created_at"], self._tz),
            approver_name=r.get("approver_name"),
            decided_at=from_utc_naive(r.get("decided_at"), self._tz),
        )
