from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.web import current_role, json_body, json_errors
from ..container import Container
from ..core.enums import Role
from .model import GeoRestriction, IPRestriction, RestrictionAssignment


def _ip_json(r: IPRestriction) -> dict:
    return {"id": r.restriction_id, "title": r.title, "allowed_ips": list(r.allowed_entries)}


def _geo_json(r: GeoRestriction) -> dict:
    return {
        "id": r.restriction_id,
        "title": r.title,
        "latitude": r.latitude,
        "longitude": r.longitude,
        "radius_meters": r.radius_meters,
    }


def _assignment_json(a: RestrictionAssignment) -> dict:
    return {
        "id": a.assignment_id,
        "employee_id": a.employee_id,
        "restriction_type": a.restriction_type.value,
        "restriction_id": a.restriction_id,
    }


def register(app: Flask, container: Container) -> None:
    service = container.restriction_service

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Unauthorized"}), 401
            if current_role() != Role.ADMIN:
                return jsonify({"error": "Access denied"}), 403
            return view(*args, **kwargs)

        return wrapper

    @app.route("/api/admin/security/ip-restrictions", methods=["GET"], endpoint="api_ip_restrictions")
    @admin_required
    @json_errors
    def list_ip_restrictions():
        rows = service.list_ip_restrictions(current_role=current_role())
        return jsonify({"restrictions": [_ip_json(r) for r in rows]}), 200

    @app.route("/api/admin/security/ip-restrictions", methods=["POST"], endpoint="api_ip_restrictions_create")
    @admin_required
    @json_errors
    def create_ip_restriction():
        data = json_body()
        restriction_id = service.create_ip_restriction(
            current_role=current_role(),
            title=data.get("title"),
            entries=data.get("allowed_ips"),
        )
        return jsonify({"success": True, "id": restriction_id}), 201

    @app.route(
        "/api/admin/security/ip-restrictions/<int:restriction_id>",
        methods=["PUT"],
        endpoint="api_ip_restrictions_update",
    )
    @admin_required
    @json_errors
    def update_ip_restriction(restriction_id: int):
        data = json_body()
        service.update_ip_restriction(
            current_role=current_role(),
            restriction_id=restriction_id,
            title=data.get("title"),
            entries=data.get("allowed_ips"),
        )
        return jsonify({"success": True, "message": "IP restriction updated"}), 200

    @app.route(
        "/api/admin/security/ip-restrictions/<int:restriction_id>",
        methods=["DELETE"],
        endpoint="api_ip_restrictions_delete",
    )
    @admin_required
    @json_errors
    def delete_ip_restriction(restriction_id: int):
        service.delete_ip_restriction(current_role=current_role(), restriction_id=restriction_id)
        return jsonify({"success": True, "message": "IP restriction deleted"}), 200

    @app.route("/api/admin/security/geo-restrictions", methods=["GET"], endpoint="api_geo_restrictions")
    @admin_required
    @json_errors
    def list_geo_restrictions():
        rows = service.list_geo_restrictions(current_role=current_role())
        return jsonify({"restrictions": [_geo_json(r) for r in rows]}), 200

    @app.route("/api/admin/security/geo-restrictions", methods=["POST"], endpoint="api_geo_restrictions_create")
    @admin_required
    @json_errors
    def create_geo_restriction():
        data = json_body()
        restriction_id = service.create_geo_restriction(
            current_role=current_role(),
            title=data.get("title"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            radius_meters=data.get("radius_meters"),
        )
        return jsonify({"success": True, "id": restriction_id}), 201

    @app.route(
        "/api/admin/security/geo-restrictions/<int:restriction_id>",
        methods=["DELETE"],
        endpoint="api_geo_restrictions_delete",
    )
    @admin_required
    @json_errors
    def delete_geo_restriction(restriction_id: int):
        service.delete_geo_restriction(current_role=current_role(), restriction_id=restriction_id)
        return jsonify({"success": True, "message": "GEO restriction deleted"}), 200

    @app.route("/api/admin/security/assign", methods=["POST"], endpoint="api_restriction_assign")
    @admin_required
    @json_errors
    def assign():
        data = json_body()
        assignment_id = service.assign(
            current_role=current_role(),
            employee_id=data.get("employee_id"),
            restriction_type=data.get("restriction_type"),
            restriction_id=data.get("restriction_id"),
        )
        return jsonify({"success": True, "id": assignment_id}), 201

    @app.route("/api/admin/security/assign/<int:assignment_id>", methods=["DELETE"], endpoint="api_restriction_unassign")
    @admin_required
    @json_errors
    def unassign(assignment_id: int):
        service.unassign(current_role=current_role(), assignment_id=assignment_id)
        return jsonify({"success": True, "message": "Assignment removed"}), 200

    @app.route("/api/admin/security/assignments", methods=["GET"], endpoint="api_restriction_assignments")
    @admin_required
    @json_errors
    def list_assignments():
        rows = service.list_assignments(current_role=current_role(), employee_id=request.args.get("employee_id"))
        return jsonify({"assignments": [_assignment_json(a) for a in rows]}), 200
