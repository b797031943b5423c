from __future__ import annotations

from enum import Enum


class RoleKind(str, Enum):
    """Stored/wire value of an employee role."""

    FIXED = "Fixed"
    ROAMING = "Roaming"
    SUPERVISOR = "Supervisor"


class RequestStatus(str, Enum):
    """Overtime approval states."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Action(str, Enum):
    LOGIN = "LOGIN"
    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    REQUEST_OT = "REQUEST_OT"
    DECIDE_OT = "DECIDE_OT"
