from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Mapping, Optional
from zoneinfo import ZoneInfo

from ..attendance.service import AttendanceLedger
from ..common.datetime_utils import parse_iso_datetime
from ..common.geo import GeoPoint, Location
from ..common.validators import optional_float, require_float, require_non_empty
from ..core.enums import Action, RequestStatus
from ..core.exceptions import (
    DomainError,
    EmployeeNotFoundError,
    InvalidActionError,
    StoreUnavailableError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.service import AuthService, EmployeeDirectory
from ..overtime.model import OvertimeInterval
from ..overtime.service import OvertimeService
from .presenters import employee_to_wire, request_to_wire, session_to_wire

logger = logging.getLogger(__name__)

# Names used by earlier web clients.
ACTION_ALIASES = {
    "LOGIN_USER": Action.LOGIN,
    "UPDATE_OT_STATUS": Action.DECIDE_OT,
}

# Actions whose writes are conditional, so repeating them after a store
# failure cannot create duplicates. REQUEST_OT always inserts a new row.
RETRYABLE_ACTIONS = {Action.LOGIN, Action.CLOCK_IN, Action.CLOCK_OUT, Action.DECIDE_OT}

_DECISION_WORDS = {
    "approved": RequestStatus.APPROVED,
    "approve": RequestStatus.APPROVED,
    "rejected": RequestStatus.REJECTED,
    "reject": RequestStatus.REJECTED,
}

Response = Dict[str, Any]


def ok(message: str, **data: Any) -> Response:
    return {"success": True, "message": message, **data}


def failure(code: str, message: str, **data: Any) -> Response:
    return {"success": False, "code": code, "message": message, **data}


def resolve_action(raw: Any) -> Action:
    name = str(raw or "").strip().upper()
    if name in ACTION_ALIASES:
        return ACTION_ALIASES[name]
    try:
        return Action(name)
    except ValueError:
        raise InvalidActionError()


def is_retryable(envelope: Any) -> bool:
    if not isinstance(envelope, Mapping):
        return False
    try:
        return resolve_action(envelope.get("action")) in RETRYABLE_ACTIONS
    except InvalidActionError:
        return False


class RequestRouter:
    """Entry seam: maps ``{action, ...payload}`` envelopes to the services.

    Only payload shape is checked here; business rules live in the services.
    Every outcome, including denials, comes back as a response dict.
    """

    def __init__(
        self,
        *,
        auth: AuthService,
        directory: EmployeeDirectory,
        ledger: AttendanceLedger,
        overtime: OvertimeService,
        tz: ZoneInfo,
    ):
        self._auth = auth
        self._directory = directory
        self._ledger = ledger
        self._overtime = overtime
        self._tz = tz
        self._handlers: Dict[Action, Callable[[Mapping[str, Any]], Response]] = {
            Action.LOGIN: self._login,
            Action.CLOCK_IN: self._clock_in,
            Action.CLOCK_OUT: self._clock_out,
            Action.REQUEST_OT: self._request_ot,
            Action.DECIDE_OT: self._decide_ot,
        }

    def dispatch(self, envelope: Any) -> Response:
        try:
            if not isinstance(envelope, Mapping):
                raise ValidationError("Request body must be a JSON object")
            action = resolve_action(envelope.get("action"))
            return self._handlers[action](envelope)
        except DomainError as e:
            logger.info("request denied: %s (%s)", e.code, e.message)
            return failure(e.code, e.message)
        except StoreUnavailableError as e:
            logger.warning("store unavailable: %s", e)
            return failure(StoreUnavailableError.code, str(e) or "Storage is temporarily unavailable")

    # ---- snapshots ----
    def _sessions(self, employee_id: str) -> list:
        now = self._ledger.now()
        return [session_to_wire(s, now=now, tz=self._tz) for s in self._ledger.recent_sessions(employee_id)]

    def _visible(self, employee_id: Optional[str], role: Any, site_id: Optional[str] = None) -> list:
        return [request_to_wire(r, tz=self._tz) for r in self._overtime.visible_to(employee_id, role, site_id)]

    def _snapshots(self, employee: Employee) -> Dict[str, list]:
        return {
            "recentSessions": self._sessions(employee.employee_id),
            "visibleOTRequests": self._visible(employee.employee_id, employee.role),
        }

    @staticmethod
    def _after_write(build: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        # The write is committed; a failed read must not turn it into a denial
        # (or into a retry that repeats it).
        try:
            return build()
        except StoreUnavailableError as e:
            logger.warning("snapshot read failed after a committed write: %s", e)
            return {"degraded": True}

    # ---- payload parsing ----
    @staticmethod
    def _location(p: Mapping[str, Any]) -> Location:
        latitude = require_float(p, "latitude")
        longitude = require_float(p, "longitude")
        accuracy = optional_float(p, "accuracy")
        if math.isnan(latitude) or math.isnan(longitude) or not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise ValidationError("Coordinates are out of range")
        if accuracy is not None and (math.isnan(accuracy) or accuracy < 0):
            raise ValidationError("accuracy must be a non-negative number")
        return Location(GeoPoint(latitude, longitude), accuracy)

    def _timestamp(self, p: Mapping[str, Any], field_name: str):
        raw = require_non_empty(p.get(field_name), field_name)
        try:
            return parse_iso_datetime(raw, self._tz)
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO date-time (YYYY-MM-DDTHH:MM)")

    @staticmethod
    def _decision(raw: Any) -> RequestStatus:
        status = _DECISION_WORDS.get(str(raw or "").strip().lower())
        if status is None:
            raise ValidationError("decision must be Approved or Rejected")
        return status

    def _viewer(self, raw: Any) -> Optional[Employee]:
        employee_id = str(raw or "").strip()
        if not employee_id:
            return None
        try:
            return self._directory.get(employee_id)
        except EmployeeNotFoundError:
            return None

    # ---- handlers ----
    def _login(self, p: Mapping[str, Any]) -> Response:
        identifier = require_non_empty(p.get("identifier") or p.get("username"), "identifier")
        credential = require_non_empty(p.get("credential") or p.get("password"), "credential")
        employee = self._auth.authenticate(identifier, credential)
        return ok("Login successful", user=employee_to_wire(employee), **self._snapshots(employee))

    def _clock_in(self, p: Mapping[str, Any]) -> Response:
        employee_id = require_non_empty(p.get("employeeIdentifier") or p.get("username"), "employeeIdentifier")
        employee = self._directory.get(employee_id)
        location = self._location(p)
        session = self._ledger.clock_in(employee.employee_id, location)
        wire = session_to_wire(session, now=session.clock_in_at, tz=self._tz)
        return ok(f"Clocked in at {wire['timeIn']}", session=wire, **self._after_write(lambda: self._snapshots(employee)))

    def _clock_out(self, p: Mapping[str, Any]) -> Response:
        employee_id = require_non_empty(p.get("employeeIdentifier") or p.get("username"), "employeeIdentifier")
        employee = self._directory.get(employee_id)
        location = self._location(p)
        session = self._ledger.clock_out(employee.employee_id, location)
        wire = session_to_wire(session, now=session.clock_out_at, tz=self._tz)
        return ok(
            f"Clocked out at {wire['timeOut']}, worked {wire['workingHours']:.2f} h",
            session=wire,
            **self._after_write(lambda: self._snapshots(employee)),
        )

    def _request_ot(self, p: Mapping[str, Any]) -> Response:
        employee = self._directory.get(require_non_empty(p.get("employeeId"), "employeeId"))
        interval = OvertimeInterval(start_at=self._timestamp(p, "start"), end_at=self._timestamp(p, "end"))
        # Name and site come from the directory, not from the client.
        request = self._overtime.create(
            employee.employee_id,
            employee.display_name,
            employee.site_id,
            interval,
            str(p.get("reason") or ""),
        )
        return ok(
            "Overtime request submitted",
            request=request_to_wire(request, tz=self._tz),
            **self._after_write(lambda: {"visibleOTRequests": self._visible(employee.employee_id, employee.role)}),
        )

    def _decide_ot(self, p: Mapping[str, Any]) -> Response:
        request_id = require_non_empty(p.get("requestId"), "requestId")
        decision = self._decision(p.get("decision") or p.get("status"))
        # Unrecognised roles are refused by the service as Forbidden.
        role = str(p.get("actingRole") or p.get("role") or "").strip()
        approver = str(p.get("approverName") or "")
        viewer = self._viewer(p.get("employeeId") or p.get("staffId"))
        site_id = str(p.get("siteId") or "").strip() or None

        request = self._overtime.decide(request_id, decision, approver, role)

        if viewer is not None:
            scope = (viewer.employee_id, viewer.role, site_id or viewer.site_id)
        else:
            scope = (None, role, site_id)
        return ok(
            f"Request {decision.value.lower()}",
            request=request_to_wire(request, tz=self._tz),
            **self._after_write(lambda: {"visibleOTRequests": self._visible(*scope)}),
        )
