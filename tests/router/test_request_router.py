from __future__ import annotations

import pytest

from src.geoclock.geoclock.container import BACKEND_MEMORY, build_container
from src.geoclock.geoclock.core.enums import Action
from src.geoclock.geoclock.core.exceptions import InvalidActionError, StoreUnavailableError
from src.geoclock.geoclock.database.bootstrap import seed_in_memory
from src.geoclock.geoclock.router.router import is_retryable, resolve_action

from conftest import FakeClock, local

HQ_FIX = {"latitude": 13.7501, "longitude": 100.5001, "accuracy": 12}


@pytest.fixture
def clock():
    return FakeClock(local(2025, 1, 1, 8, 0))


@pytest.fixture
def container(clock):
    c = build_container(backend=BACKEND_MEMORY, clock=clock)
    seed_in_memory(c.employees_repo, c.sites_repo)
    return c


@pytest.fixture
def dispatch(container):
    return container.router.dispatch


def test_unknown_action(dispatch):
    res = dispatch({"action": "DANCE"})
    assert res == {"success": False, "code": "InvalidAction", "message": "Invalid action"}


def test_missing_action_is_invalid(dispatch):
    assert dispatch({"latitude": 1})["code"] == "InvalidAction"


@pytest.mark.parametrize("envelope", [None, [], "CLOCK_IN", 42])
def test_non_object_envelope_is_bad_request(dispatch, envelope):
    res = dispatch(envelope)
    assert res["success"] is False
    assert res["code"] == "BadRequest"


def test_action_names_and_aliases():
    assert resolve_action("clock_in") == Action.CLOCK_IN
    assert resolve_action("LOGIN_USER") == Action.LOGIN
    assert resolve_action("UPDATE_OT_STATUS") == Action.DECIDE_OT
    with pytest.raises(InvalidActionError):
        resolve_action("")


def test_retryable_actions():
    assert is_retryable({"action": "CLOCK_IN"})
    assert is_retryable({"action": "DECIDE_OT"})
    assert not is_retryable({"action": "REQUEST_OT"})
    assert not is_retryable({"action": "NOPE"})
    assert not is_retryable(None)


def test_login(dispatch):
    res = dispatch({"action": "LOGIN", "identifier": "somchai", "credential": "staff123"})

    assert res["success"] is True
    assert res["user"] == {
        "employeeId": "somchai",
        "name": "Somchai Jaidee",
        "siteId": "HQ",
        "role": "Fixed",
        "position": "Storekeeper",
    }
    assert res["recentSessions"] == []
    assert res["visibleOTRequests"] == []


def test_legacy_login_shape(dispatch):
    res = dispatch({"action": "LOGIN_USER", "username": "manee", "password": "super123"})
    assert res["success"] is True
    assert res["user"]["role"] == "Supervisor"


@pytest.mark.parametrize(
    "identifier, credential",
    [("somchai", "wrong"), ("nobody", "staff123")],
)
def test_login_rejected(dispatch, identifier, credential):
    res = dispatch({"action": "LOGIN", "identifier": identifier, "credential": credential})
    assert res == {"success": False, "code": "AuthenticationFailed", "message": "Invalid identifier or credential"}


def test_login_requires_fields(dispatch):
    assert dispatch({"action": "LOGIN", "identifier": "somchai"})["code"] == "BadRequest"


def test_clock_in_and_out(dispatch, clock):
    res = dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", **HQ_FIX})

    assert res["success"] is True
    assert res["message"] == "Clocked in at 08:00:00"
    assert res["session"]["dateIn"] == "2025-01-01"
    assert res["session"]["isOpen"] is True
    assert len(res["recentSessions"]) == 1

    clock.advance(hours=8, minutes=30)
    res = dispatch({"action": "CLOCK_OUT", "employeeIdentifier": "somchai", **HQ_FIX})

    assert res["success"] is True
    assert res["message"] == "Clocked out at 16:30:00, worked 8.50 h"
    session = res["session"]
    assert session["timeOut"] == "16:30:00"
    assert session["workingHours"] == 8.5
    assert session["workingTime"] == "8h 30m"
    assert session["outLat"] == 13.7501
    assert res["recentSessions"][0]["sessionId"] == session["sessionId"]


def test_clock_in_twice(dispatch):
    dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", **HQ_FIX})
    res = dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", **HQ_FIX})
    assert res["code"] == "AlreadyOpenSession"


def test_clock_out_without_clock_in(dispatch):
    res = dispatch({"action": "CLOCK_OUT", "employeeIdentifier": "somchai", **HQ_FIX})
    assert res["success"] is False
    assert res["code"] == "NoOpenSession"


def test_clock_in_out_of_range(dispatch):
    res = dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", "latitude": 13.76, "longitude": 100.50})
    assert res["code"] == "OutOfRange"
    assert "out of range" in res["message"]


def test_clock_in_weak_signal(dispatch):
    res = dispatch({"action": "CLOCK_IN", "employeeIdentifier": "nok", "latitude": 7.0, "longitude": 98.0, "accuracy": 350})
    assert res["code"] == "WeakSignal"


@pytest.mark.parametrize(
    "fix",
    [
        {"longitude": 100.5},
        {"latitude": "north", "longitude": 100.5},
        {"latitude": 95, "longitude": 100.5},
        {"latitude": 13.75, "longitude": -181},
        {"latitude": "nan", "longitude": 100.5},
        {"latitude": 13.75, "longitude": 100.5, "accuracy": -1},
        {"latitude": 13.75, "longitude": 100.5, "accuracy": True},
    ],
)
def test_clock_in_bad_coordinates(dispatch, fix):
    res = dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", **fix})
    assert res["code"] == "BadRequest"


def test_numeric_strings_are_accepted(dispatch):
    res = dispatch({"action": "CLOCK_IN", "username": "somchai", "latitude": "13.7501", "longitude": "100.5001"})
    assert res["success"] is True


def test_unknown_employee(dispatch):
    res = dispatch({"action": "CLOCK_IN", "employeeIdentifier": "nobody", **HQ_FIX})
    assert res["code"] == "EmployeeNotFound"


def _request_ot(dispatch, employee_id="somchai"):
    return dispatch(
        {
            "action": "REQUEST_OT",
            "employeeId": employee_id,
            "name": "Someone Else",
            "siteId": "WH2",
            "start": "2025-01-01T18:00",
            "end": "2025-01-01T20:00",
            "reason": "Month-end stock count",
        }
    )


def test_request_ot_uses_directory_identity(dispatch):
    res = _request_ot(dispatch)

    assert res["success"] is True
    req = res["request"]
    assert req["status"] == "Pending"
    assert req["name"] == "Somchai Jaidee"
    assert req["siteId"] == "HQ"
    assert req["hours"] == 2.0
    assert req["start"] == "2025-01-01T18:00:00+07:00"
    assert [r["id"] for r in res["visibleOTRequests"]] == [req["id"]]


def test_request_ot_bad_payload(dispatch):
    base = {"action": "REQUEST_OT", "employeeId": "somchai", "start": "2025-01-01T18:00", "end": "2025-01-01T20:00"}
    assert dispatch(base)["code"] == "BadRequest"
    assert dispatch({**base, "reason": "x", "end": "tonight"})["code"] == "BadRequest"
    assert dispatch({**base, "reason": "x", "end": "2025-01-01T17:00"})["code"] == "BadRequest"


def test_decide_ot(dispatch, clock):
    request_id = _request_ot(dispatch)["request"]["id"]
    clock.advance(hours=2)

    res = dispatch(
        {
            "action": "DECIDE_OT",
            "requestId": request_id,
            "decision": "Approved",
            "actingRole": "Supervisor",
            "siteId": "HQ",
            "approverName": "Manee Rakdee",
            "employeeId": "manee",
        }
    )

    assert res["success"] is True
    assert res["message"] == "Request approved"
    assert res["request"]["status"] == "Approved"
    assert res["request"]["approverName"] == "Manee Rakdee"
    assert res["request"]["decidedAt"] == "2025-01-01T10:00:00+07:00"
    assert res["visibleOTRequests"][0]["status"] == "Approved"

    again = dispatch(
        {
            "action": "UPDATE_OT_STATUS",
            "requestId": request_id,
            "status": "reject",
            "role": "Supervisor",
            "approverName": "Preecha",
        }
    )
    assert again["code"] == "AlreadyDecided"


def test_decide_ot_forbidden_for_staff(dispatch):
    request_id = _request_ot(dispatch)["request"]["id"]
    res = dispatch(
        {"action": "DECIDE_OT", "requestId": request_id, "decision": "Approved", "actingRole": "Fixed", "approverName": "S"}
    )
    assert res["code"] == "Forbidden"


def test_decide_ot_validation(dispatch):
    base = {"action": "DECIDE_OT", "requestId": "OT-x", "actingRole": "Supervisor", "approverName": "M"}
    assert dispatch({**base, "decision": "Pending"})["code"] == "BadRequest"
    assert dispatch({**base, "decision": "Approved"})["code"] == "RequestNotFound"
    assert dispatch({**base, "decision": "Approved", "actingRole": "Boss"})["code"] == "RequestNotFound"


@pytest.mark.parametrize("acting_role", ["Boss", "", "supervisor-ish"])
def test_decide_ot_unknown_role_is_forbidden(dispatch, acting_role):
    request_id = _request_ot(dispatch)["request"]["id"]
    res = dispatch(
        {
            "action": "DECIDE_OT",
            "requestId": request_id,
            "decision": "Approved",
            "actingRole": acting_role,
            "approverName": "M",
        }
    )
    assert res["code"] == "Forbidden"


def test_store_failure_becomes_response(container, monkeypatch):
    def unavailable(*args, **kwargs):
        raise StoreUnavailableError("lock wait timeout")

    monkeypatch.setattr(container.ledger, "clock_in", unavailable)
    res = container.router.dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", **HQ_FIX})

    assert res == {"success": False, "code": "StoreUnavailable", "message": "lock wait timeout"}


def fail_once(real):
    calls = []

    def wrapper(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            raise StoreUnavailableError("read timed out")
        return real(*args, **kwargs)

    return wrapper


def test_clock_out_is_reported_even_if_snapshot_read_fails(container, dispatch, clock, monkeypatch):
    dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", **HQ_FIX})
    clock.advance(hours=1)
    monkeypatch.setattr(container.ledger, "recent_sessions", fail_once(container.ledger.recent_sessions))

    res = dispatch({"action": "CLOCK_OUT", "employeeIdentifier": "somchai", **HQ_FIX})

    assert res["success"] is True
    assert res["degraded"] is True
    assert "recentSessions" not in res
    assert res["session"]["isOpen"] is False
    assert [s.is_open for s in container.attendance_repo.list_recent("somchai", 5)] == [False]


def test_clock_in_is_reported_even_if_snapshot_read_fails(container, dispatch, monkeypatch):
    monkeypatch.setattr(container.overtime_service, "visible_to", fail_once(container.overtime_service.visible_to))

    res = dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", **HQ_FIX})

    assert res["success"] is True
    assert res["degraded"] is True
    assert res["session"]["isOpen"] is True


def test_request_ot_is_reported_even_if_snapshot_read_fails(container, dispatch, monkeypatch):
    monkeypatch.setattr(container.overtime_service, "visible_to", fail_once(container.overtime_service.visible_to))

    res = _request_ot(dispatch)

    assert res["success"] is True
    assert res["degraded"] is True
    assert res["request"]["status"] == "Pending"
    assert len(container.overtime_repo.list_for_employee("somchai", limit=10)) == 1


def test_decide_ot_is_reported_even_if_snapshot_read_fails(container, dispatch, monkeypatch):
    request_id = _request_ot(dispatch)["request"]["id"]
    monkeypatch.setattr(container.overtime_service, "visible_to", fail_once(container.overtime_service.visible_to))

    res = dispatch(
        {
            "action": "DECIDE_OT",
            "requestId": request_id,
            "decision": "Rejected",
            "actingRole": "Supervisor",
            "approverName": "Manee Rakdee",
        }
    )

    assert res["success"] is True
    assert res["degraded"] is True
    assert res["request"]["status"] == "Rejected"
    assert container.overtime_repo.get(request_id).status.value == "Rejected"


def test_store_failure_before_the_write_is_still_reported(container, dispatch, monkeypatch):
    monkeypatch.setattr(container.ledger, "clock_out", fail_once(container.ledger.clock_out))
    dispatch({"action": "CLOCK_IN", "employeeIdentifier": "somchai", **HQ_FIX})

    res = dispatch({"action": "CLOCK_OUT", "employeeIdentifier": "somchai", **HQ_FIX})

    assert res["code"] == "StoreUnavailable"
    assert container.attendance_repo.find_open("somchai") is not None


def test_decide_ot_without_site_uses_the_deciders_record(dispatch):
    request_id = _request_ot(dispatch)["request"]["id"]

    res = dispatch(
        {
            "action": "DECIDE_OT",
            "requestId": request_id,
            "decision": "Approved",
            "actingRole": "Supervisor",
            "approverName": "Manee Rakdee",
            "employeeId": "manee",
        }
    )

    assert [r["id"] for r in res["visibleOTRequests"]] == [request_id]
    assert res["visibleOTRequests"][0]["status"] == "Approved"


def test_decide_ot_unknown_viewer_falls_back_to_payload_scope(dispatch):
    request_id = _request_ot(dispatch)["request"]["id"]

    res = dispatch(
        {
            "action": "DECIDE_OT",
            "requestId": request_id,
            "decision": "Approved",
            "actingRole": "Supervisor",
            "approverName": "Manee Rakdee",
            "employeeId": "nobody",
            "siteId": "HQ",
        }
    )

    assert res["success"] is True
    assert [r["id"] for r in res["visibleOTRequests"]] == [request_id]


def test_request_ot_accepts_utc_z_timestamps(dispatch):
    res = dispatch(
        {
            "action": "REQUEST_OT",
            "employeeId": "somchai",
            "start": "2025-01-01T11:00:00.000Z",
            "end": "2025-01-01T13:30:00.000Z",
            "reason": "Inventory audit",
        }
    )

    assert res["success"] is True
    assert res["request"]["start"] == "2025-01-01T18:00:00+07:00"
    assert res["request"]["hours"] == 2.5
