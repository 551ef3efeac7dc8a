from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, session

from ..common.web import current_role, json_body, json_errors
from ..container import Container
from ..core.enums import Role
from .model import AttendanceSettings


def _settings_json(s: AttendanceSettings) -> dict:
    return {
        "check_in_start": s.check_in_start,
        "check_in_end": s.check_in_end,
        "check_out_start": s.check_out_start,
        "check_out_end": s.check_out_end,
        "work_hours": s.work_hours,
        "overtime_rate": s.overtime_rate,
        "auto_checkout": s.auto_checkout,
    }


def register(app: Flask, container: Container) -> None:
    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Unauthorized"}), 401
            if current_role() != Role.ADMIN:
                return jsonify({"error": "Access denied"}), 403
            return view(*args, **kwargs)

        return wrapper

    @app.route("/api/admin/settings/attendance", methods=["GET"], endpoint="api_attendance_settings")
    @admin_required
    @json_errors
    def get_settings():
        return jsonify({"settings": _settings_json(container.settings_service.get_settings())}), 200

    @app.route("/api/admin/settings/attendance", methods=["PUT"], endpoint="api_attendance_settings_update")
    @admin_required
    @json_errors
    def update_settings():
        data = json_body()
        updated = container.settings_service.update_settings(
            current_role=current_role(),
            check_in_start=data.get("check_in_start"),
            check_in_end=data.get("check_in_end"),
            check_out_start=data.get("check_out_start"),
            check_out_end=data.get("check_out_end"),
            work_hours=data.get("work_hours"),
            overtime_rate=data.get("overtime_rate"),
            auto_checkout=data.get("auto_checkout"),
        )
        return jsonify(
            {
                "success": True,
                "message": "Attendance settings updated",
                "settings": _settings_json(updated),
            }
        ), 200
