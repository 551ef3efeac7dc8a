from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest
from flask import Flask

from src.hrms_attendance.hrms_attendance.attendance.controller import register
from src.hrms_attendance.hrms_attendance.attendance.service import AttendanceService
from src.hrms_attendance.hrms_attendance.core.enums import RestrictionType
from src.hrms_attendance.hrms_attendance.employees.model import Employee
from src.hrms_attendance.hrms_attendance.restrictions.evaluator import RestrictionEvaluator
from src.hrms_attendance.hrms_attendance.restrictions.model import (
    GeoRestriction,
    IPRestriction,
    RestrictionAssignment,
)
from src.hrms_attendance.hrms_attendance.settings.model import AttendanceSettings
from src.hrms_attendance.hrms_attendance.settings.service import SettingsService

from test_attendance_service import InMemoryAttendance, InMemoryEmployees, InMemoryRestrictions


class StaticSettings:
    def __init__(self, settings=None):
        self._settings = settings

    def get(self):
        return self._settings

    def save(self, settings):
        self._settings = settings


def _restrictions() -> InMemoryRestrictions:
    # employee 1: IP only; employee 2: GEO only; employee 3: unrestricted
    return InMemoryRestrictions(
        ip={1: IPRestriction(restriction_id=1, title="Office LAN", allowed_entries=("192.168.1.0/24",))},
        geo={2: GeoRestriction(restriction_id=2, title="HQ", latitude=10.7769, longitude=106.7009, radius_meters=200)},
        assignments=[
            RestrictionAssignment(assignment_id=1, employee_id=1, restriction_type=RestrictionType.IP, restriction_id=1),
            RestrictionAssignment(assignment_id=2, employee_id=2, restriction_type=RestrictionType.GEO, restriction_id=2),
        ],
    )


def _app(settings=None) -> Flask:
    employees = InMemoryEmployees(
        {
            1: Employee(employee_id=1, user_id=11, full_name="Lan Nguyen"),
            2: Employee(employee_id=2, user_id=22, full_name="Minh Tran"),
            3: Employee(employee_id=3, user_id=33, full_name="Hoa Le"),
        }
    )
    evaluator = RestrictionEvaluator(_restrictions())
    container = SimpleNamespace(
        employees_repo=employees,
        restriction_evaluator=evaluator,
        attendance_service=AttendanceService(
            InMemoryAttendance(),
            employees,
            SettingsService(StaticSettings(settings)),
            evaluator,
        ),
    )

    app = Flask(__name__)
    app.secret_key = "test-secret"
    app.config["TESTING"] = True
    register(app, container)
    return app


def _client(app: Flask, user_id=None, role=None):
    client = app.test_client()
    if user_id is not None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            if role is not None:
                sess["role"] = role
    return client


def test_requires_session():
    client = _client(_app())

    resp = client.post("/api/attendance/checkin", json={"timestamp": "2025-01-06T09:00:00"})

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Unauthorized"}


def test_checkin_from_allowed_network():
    client = _client(_app(), user_id=11)

    resp = client.post(
        "/api/attendance/checkin",
        json={"timestamp": "2025-01-06T09:00:00"},
        headers={"X-Forwarded-For": "192.168.1.20, 10.0.0.1"},
    )

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["attendance"]["check_in_status"] == "on_time"
    assert body["attendance"]["date"] == "2025-01-06"


def test_checkin_from_disallowed_network_is_forbidden():
    client = _client(_app(), user_id=11)

    resp = client.post(
        "/api/attendance/checkin",
        json={"timestamp": "2025-01-06T09:00:00"},
        headers={"X-Forwarded-For": "8.8.8.8"},
    )

    assert resp.status_code == 403
    assert resp.get_json() == {
        "error": "Your IP is not in the allowed range for check-in.",
        "code": "IP_NOT_ALLOWED",
    }


@pytest.mark.parametrize(
    "payload, status, code",
    [
        ({"timestamp": "2025-01-06T09:00:00"}, 400, "GEO_MISSING"),
        ({"timestamp": "2025-01-06T09:00:00", "latitude": 0, "longitude": 0}, 403, "GEO_OUTSIDE"),
    ],
)
def test_checkin_geo_failures(payload, status, code):
    client = _client(_app(), user_id=22)

    resp = client.post("/api/attendance/checkin", json=payload)

    assert resp.status_code == status
    assert resp.get_json()["code"] == code


def test_checkin_validation_and_missing_employee():
    app = _app()

    resp = _client(app, user_id=33).post("/api/attendance/checkin", json={})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Timestamp is required"

    resp = _client(app, user_id=999).post("/api/attendance/checkin", json={"timestamp": "2025-01-06T09:00:00"})
    assert resp.status_code == 404


def test_checkout_after_checkin():
    client = _client(_app(), user_id=33)
    client.post("/api/attendance/checkin", json={"timestamp": "2025-01-06T09:00:00"})

    resp = client.post("/api/attendance/checkout", json={"timestamp": "2025-01-06T18:00:00"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["attendance"]["status"] == "present"
    assert body["attendance"]["work_hours"] == 9.0

    again = client.post("/api/attendance/checkout", json={"timestamp": "2025-01-06T18:05:00"})
    assert again.status_code == 400


def test_misconfigured_settings_return_500():
    broken = AttendanceSettings(check_in_start="8h", check_in_end="10:00", check_out_start="17:00", check_out_end="19:00")
    client = _client(_app(broken), user_id=33)

    resp = client.post("/api/attendance/checkin", json={"timestamp": "2025-01-06T09:00:00"})

    assert resp.status_code == 500


def test_restriction_requirements():
    app = _app()

    geo = _client(app, user_id=22).get("/api/attendance/restrictions").get_json()
    free = _client(app, user_id=33).get("/api/attendance/restrictions").get_json()

    assert geo == {"has_ip_restriction": False, "has_geo_restriction": True, "requires_location": True}
    assert free == {"has_ip_restriction": False, "has_geo_restriction": False, "requires_location": False}


def test_checkin_with_out_of_range_integer_latitude_needs_location():
    client = _client(_app(), user_id=22)

    resp = client.post(
        "/api/attendance/checkin",
        json={"timestamp": "2025-01-06T09:00:00", "latitude": 10**400, "longitude": 106.7009},
    )

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "GEO_MISSING"


@pytest.mark.parametrize("path", ["/api/attendance/checkin", "/api/attendance/checkout"])
@pytest.mark.parametrize("payload", [["2025-01-06T09:00:00"], "2025-01-06T09:00:00", 42])
def test_non_object_json_body_is_rejected(path, payload):
    client = _client(_app(), user_id=33)

    resp = client.post(path, json=payload)

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Request body must be a JSON object"}


def test_history_and_today():
    client = _client(_app(), user_id=33)
    client.post("/api/attendance/checkin", json={"timestamp": "2025-01-06T09:00:00"})
    client.post("/api/attendance/checkout", json={"timestamp": "2025-01-06T18:00:00"})

    history = client.get("/api/attendance/history").get_json()["records"]
    today = client.get("/api/attendance/today")

    assert [(r["date"], r["status"]) for r in history] == [("2025-01-06", "✓ Present")]
    assert today.status_code == 200
    assert today.get_json()["date"] == date.today().isoformat()
    assert today.get_json()["status"] in ("half_day", "absent")


def test_admin_manual_entry_and_list():
    client = _client(_app(), user_id=11, role="admin")

    resp = client.post(
        "/api/admin/attendance/manual",
        json={"employee_id": 3, "date": "2025-01-06", "check_in": "08:30", "check_out": "17:30", "notes": "badge broken"},
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["attendance"]["status"] == "present"
    assert body["attendance"]["work_hours"] == 9.0

    listed = client.get("/api/admin/attendance/list?date=2025-01-06").get_json()
    assert listed["total"] == 1
    assert listed["records"][0]["employee_id"] == 3
    assert listed["records"][0]["summary"] == "On Time"
    assert listed["records"][0]["manual"] is True


def test_admin_attendance_routes_are_admin_only():
    app = _app()

    anonymous = _client(app).get("/api/admin/attendance/list")
    staff = _client(app, user_id=11, role="staff").post("/api/admin/attendance/manual", json={})

    assert anonymous.status_code == 401
    assert staff.status_code == 403
    assert staff.get_json() == {"error": "Access denied"}


def test_admin_manual_entry_validation():
    client = _client(_app(), user_id=11, role="admin")

    missing = client.post("/api/admin/attendance/manual", json={"date": "2025-01-06", "check_in": "08:30", "check_out": "17:30"})
    bad_limit = client.get("/api/admin/attendance/list?limit=zero")

    assert missing.status_code == 400
    assert bad_limit.status_code == 400
