from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import to_iso
from ..common.http import current_tenant_id, json_endpoint, request_json
from ..container import Container
from .model import Session
from .validators import validate_list_filters


def session_to_dict(s: Session) -> dict:
    return {
        "id": s.session_id,
        "tenantId": s.tenant_id,
        "title": s.title,
        "startsAt": to_iso(s.starts_at),
        "endsAt": to_iso(s.ends_at),
        "groupIds": list(s.group_ids),
        "createdAt": to_iso(s.created_at),
        "updatedAt": to_iso(s.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    service = container.session_service

    @app.route("/sessions", methods=["GET"], endpoint="sessions_list")
    @json_endpoint
    def sessions_list():
        filters = validate_list_filters(request.args, tenant_id=current_tenant_id()).unwrap()
        return jsonify([session_to_dict(s) for s in service.list(filters)])

    @app.route("/sessions/<session_id>", methods=["GET"], endpoint="sessions_get")
    @json_endpoint
    def sessions_get(session_id: str):
        return jsonify(session_to_dict(service.get_by_id(session_id, current_tenant_id())))

    @app.route("/sessions", methods=["POST"], endpoint="sessions_create")
    @json_endpoint
    def sessions_create():
        tenant_id = current_tenant_id()
        created = service.create(request_json(), tenant_id)
        return jsonify(session_to_dict(created)), 201

    @app.route("/sessions/bulk", methods=["POST"], endpoint="sessions_bulk_create")
    @json_endpoint
    def sessions_bulk_create():
        tenant_id = current_tenant_id()
        created = service.bulk_create(request_json(), tenant_id)
        return jsonify([session_to_dict(s) for s in created]), 201

    @app.route("/sessions/<session_id>", methods=["PATCH"], endpoint="sessions_update")
    @json_endpoint
    def sessions_update(session_id: str):
        tenant_id = current_tenant_id()
        updated = service.update(session_id, request_json(), tenant_id)
        return jsonify(session_to_dict(updated))

    @app.route("/sessions/<session_id>", methods=["DELETE"], endpoint="sessions_delete")
    @json_endpoint
    def sessions_delete(session_id: str):
        deleted_id = service.delete(session_id, current_tenant_id())
        return jsonify({"id": deleted_id})
