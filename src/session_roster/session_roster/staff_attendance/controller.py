from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_tenant_id, current_user_id, json_endpoint, request_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.staff_attendance_service

    @app.route("/sessions/<session_id>/staff-attendance", methods=["GET"], endpoint="staff_attendance_roster")
    @json_endpoint
    def staff_attendance_roster(session_id: str):
        roster = service.get_roster(session_id, current_tenant_id())
        return jsonify([item.to_dict() for item in roster])

    @app.route("/sessions/<session_id>/staff-attendance", methods=["PATCH"], endpoint="staff_attendance_mark")
    @json_endpoint
    def staff_attendance_mark(session_id: str):
        # Writes need a real acting user, not just a tenant.
        acting_user_id = current_user_id()
        tenant_id = current_tenant_id()
        roster = service.upsert(session_id, tenant_id, acting_user_id, request_json())
        return jsonify([item.to_dict() for item in roster])
