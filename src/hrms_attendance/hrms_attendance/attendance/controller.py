from __future__ import annotations

from datetime import datetime
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.web import current_role, json_body, json_errors
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..container import Container
from ..restrictions.ip_matcher import extract_client_ip
from ..restrictions.model import RESTRICTION_FAILURE_RESPONSES
from .model import AttendanceRecord


def _record_json(record: AttendanceRecord) -> dict:
    return {
        "attendance_id": record.attendance_id,
        "employee_id": record.employee_id,
        "date": record.work_date.isoformat(),
        "check_in": record.check_in_time.isoformat() if record.check_in_time else None,
        "check_out": record.check_out_time.isoformat() if record.check_out_time else None,
        "status": record.status.value,
        "check_in_status": record.check_in_status.value if record.check_in_status else None,
        "check_in_duration": record.check_in_duration,
        "check_out_status": record.check_out_status.value if record.check_out_status else None,
        "check_out_duration": record.check_out_duration,
        "work_hours": record.work_hours,
        "late_minutes": record.late_minutes,
        "overtime_minutes": record.overtime_minutes,
        "early_checkout": record.early_checkout,
        "restriction_passed": record.restriction_passed,
        "restriction_failure_code": record.restriction_failure_code,
    }


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Unauthorized"}), 401
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Unauthorized"}), 401
            if current_role() != Role.ADMIN:
                return jsonify({"error": "Access denied"}), 403
            return view(*args, **kwargs)

        return wrapper

    def _current_employee():
        employee = container.employees_repo.get_by_user_id(int(session["user_id"]))
        if not employee:
            raise NotFoundError("Employee record not found")
        return employee

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_attendance_checkin")
    @login_required
    @json_errors
    def api_checkin():
        data = json_body()
        employee = _current_employee()

        outcome = container.attendance_service.check_in(
            employee.employee_id,
            timestamp=data.get("timestamp"),
            client_ip=extract_client_ip(request),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )

        if not outcome.accepted:
            code = outcome.restriction.failure_code
            failure = RESTRICTION_FAILURE_RESPONSES[code]
            return jsonify({"error": failure.message, "code": code.value}), failure.http_status

        return jsonify(
            {
                "success": True,
                "message": f"Checked in successfully. {outcome.check_in.description}",
                "attendance": _record_json(outcome.record),
            }
        ), 200

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_attendance_checkout")
    @login_required
    @json_errors
    def api_checkout():
        data = json_body()
        employee = _current_employee()

        record = container.attendance_service.check_out(employee.employee_id, timestamp=data.get("timestamp"))
        return jsonify(
            {
                "success": True,
                "message": f"Checked out successfully. Work hours: {record.work_hours:.1f}",
                "attendance": _record_json(record),
            }
        ), 200

    @app.route("/api/attendance/restrictions", methods=["GET"], endpoint="api_attendance_restrictions")
    @login_required
    @json_errors
    def api_restrictions():
        employee = _current_employee()
        req = container.restriction_evaluator.requirements(employee.employee_id)
        return jsonify(
            {
                "has_ip_restriction": req.has_ip_restriction,
                "has_geo_restriction": req.has_geo_restriction,
                "requires_location": req.requires_location,
            }
        ), 200

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    @json_errors
    def api_today():
        employee = _current_employee()
        now = datetime.now()
        calc = container.attendance_service.day_status(employee.employee_id, now.date(), now)
        return jsonify(
            {
                "date": now.date().isoformat(),
                "status": calc.attendance_status.value,
                "is_present": calc.is_present,
                "check_in_status": calc.check_in_status.status.value if calc.check_in_status else None,
                "check_out_status": calc.check_out_status.status.value if calc.check_out_status else None,
                "work_hours": calc.work_hours,
                "description": calc.description,
            }
        ), 200

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    @json_errors
    def api_history():
        employee = _current_employee()
        rows = container.attendance_service.get_history_ui(employee.employee_id)
        return jsonify({"records": rows}), 200

    @app.route("/api/admin/attendance/manual", methods=["POST"], endpoint="api_admin_attendance_manual")
    @admin_required
    @json_errors
    def api_manual():
        data = json_body()
        record = container.attendance_service.record_manual(
            current_role=current_role(),
            employee_id=data.get("employee_id"),
            work_date=data.get("date"),
            check_in=data.get("check_in"),
            check_out=data.get("check_out"),
            notes=data.get("notes"),
        )
        return jsonify(
            {
                "success": True,
                "message": "Attendance record saved",
                "attendance": _record_json(record),
            }
        ), 200

    @app.route("/api/admin/attendance/list", methods=["GET"], endpoint="api_admin_attendance_list")
    @admin_required
    @json_errors
    def api_admin_list():
        rows = container.attendance_service.list_records(
            current_role=current_role(),
            now=datetime.now(),
            work_date=request.args.get("date"),
            limit=request.args.get("limit", 100),
            offset=request.args.get("offset", 0),
        )
        return jsonify({"records": rows, "total": len(rows)}), 200
