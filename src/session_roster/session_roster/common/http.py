from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    ForbiddenError,
    HardCapExceededError,
    NotFoundError,
    OperationFailedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (ForbiddenError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (OperationFailedError, 500),
)


def error_response(exc: DomainError):
    status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(exc, kind)), 400)
    body = {"success": False, "message": str(exc)}
    if isinstance(exc, HardCapExceededError):
        body["code"] = exc.code
        body["orgId"] = exc.org_id
    return jsonify(body), status


def json_endpoint(view):
    """Turn domain errors into JSON responses; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("unhandled error in %s %s", request.method, request.path)
            return jsonify({"success": False, "message": "Operation failed"}), 500

    return wrapper


def current_tenant_id() -> str:
    tenant_id = session.get("tenant_id")
    if not tenant_id:
        raise AuthenticationError("Tenant context required")
    return str(tenant_id)


def current_user_id() -> str:
    user_id = session.get("user_id")
    if not user_id:
        raise AuthenticationError("Authenticated user required")
    return str(user_id)


def request_json():
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("invalid body")
    return payload
