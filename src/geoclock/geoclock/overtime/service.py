from __future__ import annotations

import logging
import secrets
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Union
from zoneinfo import ZoneInfo

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_VISIBLE_REQUESTS
from ..core.enums import RequestStatus, RoleKind
from ..core.exceptions import (
    AlreadyDecidedError,
    AuthorizationError,
    RequestNotFoundError,
    ValidationError,
)
from ..employees.model import EmployeeRole
from .model import OvertimeInterval, OvertimeRequest
from .repository import OvertimeRepository

logger = logging.getLogger(__name__)

DECISIONS = {RequestStatus.APPROVED, RequestStatus.REJECTED}


def _kind_of(role: Union[EmployeeRole, RoleKind, str, None]) -> Optional[RoleKind]:
    """Role kind of a role object or its wire name; None when unrecognised."""
    kind = getattr(role, "kind", role)
    if isinstance(kind, RoleKind):
        return kind
    try:
        return RoleKind(str(kind or "").strip())
    except ValueError:
        return None


def _decision_of(value: Union[RequestStatus, str]) -> RequestStatus:
    try:
        status = RequestStatus(value)
    except ValueError:
        status = None
    if status not in DECISIONS:
        raise ValidationError("Decision must be Approved or Rejected")
    return status


def new_request_id(employee_id: str, now: datetime) -> str:
    """Timestamp + requester + a short random suffix."""
    return f"OT-{now:%Y%m%d%H%M%S%f}-{employee_id}-{secrets.token_hex(3)}"


class OvertimeService:
    """Overtime request store: creation, supervisor decisions, visibility."""

    def __init__(
        self,
        requests: OvertimeRepository,
        *,
        tz: ZoneInfo,
        visible_limit: int = DEFAULT_VISIBLE_REQUESTS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._requests = requests
        self._tz = tz
        self._visible_limit = int(visible_limit)
        self._clock = clock or (lambda: now_local(tz))

    def _now(self, now: Optional[datetime]) -> datetime:
        if now is None:
            now = self._clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=self._tz)
        return now.astimezone(self._tz)

    def create(
        self,
        employee_id: str,
        name: str,
        site_id: Optional[str],
        interval: OvertimeInterval,
        reason: str,
        *,
        now: Optional[datetime] = None,
    ) -> OvertimeRequest:
        now = self._now(now)
        employee_id = require_non_empty(employee_id, "Employee id")
        reason = require_non_empty(reason, "Reason")
        if interval.end_at <= interval.start_at:
            raise ValidationError("Overtime end must be after its start")

        request = OvertimeRequest(
            request_id=new_request_id(employee_id, now),
            employee_id=employee_id,
            display_name=(name or "").strip() or employee_id,
            site_id=site_id,
            interval=interval,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=now,
        )
        self._requests.add(request)
        logger.info("OT request %s created by %s (%.2fh)", request.request_id, employee_id, interval.hours)
        return request

    def decide(
        self,
        request_id: str,
        new_status: RequestStatus,
        approver_name: str,
        acting_role: Union[EmployeeRole, RoleKind, str, None],
        *,
        now: Optional[datetime] = None,
    ) -> OvertimeRequest:
        now = self._now(now)
        request_id = require_non_empty(request_id, "Request id")
        status = _decision_of(new_status)

        current = self._requests.get(request_id)
        if not current:
            raise RequestNotFoundError()
        if _kind_of(acting_role) != RoleKind.SUPERVISOR:
            logger.info("OT decision on %s refused: acting role is not supervisor", request_id)
            raise AuthorizationError()
        if not current.is_pending:
            raise AlreadyDecidedError()

        approver_name = require_non_empty(approver_name, "Approver name")

        if not self._requests.decide(
            request_id=request_id,
            status=status,
            approver_name=approver_name,
            decided_at=now,
        ):
            # Another supervisor decided first.
            raise AlreadyDecidedError()

        logger.info("OT request %s %s by %s", request_id, status.value, approver_name)
        # The swap only succeeds from Pending, so the stored row now matches this.
        return replace(current, status=status, approver_name=approver_name, decided_at=now)

    def visible_to(
        self,
        employee_id: Optional[str],
        role: Union[EmployeeRole, RoleKind, str, None],
        site_id: Optional[str] = None,
        *,
        limit: Optional[int] = None,
    ) -> List[OvertimeRequest]:
        """Supervisors: own site's requests plus pending ones from every site.
        Everyone else: own requests only. Most recent first.
        """
        limit = limit or self._visible_limit
        if site_id is None:
            site_id = getattr(role, "site_id", None)

        if _kind_of(role) == RoleKind.SUPERVISOR:
            return list(self._requests.list_for_supervisor(site_id, limit=limit))
        if not employee_id:
            return []
        return list(self._requests.list_for_employee(employee_id, limit=limit))
