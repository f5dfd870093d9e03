from __future__ import annotations

from typing import Any, Mapping

from ..common.validators import (
    parse_id_list,
    parse_optional_text,
    parse_optional_timestamp,
    parse_timestamp,
    require_non_empty,
)
from ..core.constants import MAX_BULK_SESSIONS, MAX_TITLE_LENGTH
from ..core.result import Err, Ok, Result
from .model import UNSET, SessionCreate, SessionListFilters, SessionPatch


def _optional_tenant_id(payload: Mapping[str, Any]) -> Result:
    if payload.get("tenantId") is None:
        return Ok(None)
    return require_non_empty(payload["tenantId"], "tenantId")


def validate_session_create(payload: Any) -> Result[SessionCreate]:
    """Shape checks for a create body. Cross-field and store checks live in the service."""
    if not isinstance(payload, Mapping):
        return Err("invalid body")

    tenant_id = _optional_tenant_id(payload)
    if not tenant_id.ok:
        return tenant_id
    starts_at = parse_timestamp(payload.get("startsAt"), "startsAt")
    if not starts_at.ok:
        return starts_at
    ends_at = parse_timestamp(payload.get("endsAt"), "endsAt")
    if not ends_at.ok:
        return ends_at
    title = parse_optional_text(payload.get("title"), "title", max_length=MAX_TITLE_LENGTH)
    if not title.ok:
        return title
    group_ids = parse_id_list(payload.get("groupIds"), "groupIds")
    if not group_ids.ok:
        return group_ids

    return Ok(
        SessionCreate(
            tenant_id=tenant_id.value,
            starts_at=starts_at.value,
            ends_at=ends_at.value,
            title=title.value,
            group_ids=group_ids.value,
        )
    )


def validate_session_patch(payload: Any) -> Result[SessionPatch]:
    """Only keys present in the body end up set on the patch."""
    if not isinstance(payload, Mapping):
        return Err("invalid body")

    changes: dict[str, Any] = {}

    if "tenantId" in payload:
        tenant_id = _optional_tenant_id(payload)
        if not tenant_id.ok:
            return tenant_id
        changes["tenant_id"] = tenant_id.value

    for key, field in (("startsAt", "starts_at"), ("endsAt", "ends_at")):
        if key in payload:
            if payload[key] is None:
                return Err(f"{key} cannot be cleared")
            parsed = parse_timestamp(payload[key], key)
            if not parsed.ok:
                return parsed
            changes[field] = parsed.value

    if "title" in payload:
        title = parse_optional_text(payload["title"], "title", max_length=MAX_TITLE_LENGTH)
        if not title.ok:
            return title
        changes["title"] = title.value

    if "groupIds" in payload:
        group_ids = parse_id_list(payload["groupIds"], "groupIds")
        if not group_ids.ok:
            return group_ids
        changes["group_ids"] = group_ids.value

    starts_at = changes.get("starts_at", UNSET)
    ends_at = changes.get("ends_at", UNSET)
    if starts_at is not UNSET and ends_at is not UNSET and ends_at <= starts_at:
        return Err("endsAt must be after startsAt")

    return Ok(SessionPatch(**changes))


def validate_bulk_create(payload: Any) -> Result[list[SessionCreate]]:
    if not isinstance(payload, Mapping) or not isinstance(payload.get("sessions"), list):
        return Err("sessions must be a list")

    items = payload["sessions"]
    if not items:
        return Err("sessions must not be empty")
    if len(items) > MAX_BULK_SESSIONS:
        return Err(f"at most {MAX_BULK_SESSIONS} sessions per request")

    parsed: list[SessionCreate] = []
    for index, item in enumerate(items):
        result = validate_session_create(item)
        if not result.ok:
            return Err(f"sessions[{index}]: {result.reason}")
        parsed.append(result.value)
    return Ok(parsed)


def validate_list_filters(args: Mapping[str, Any], *, tenant_id: str) -> Result[SessionListFilters]:
    window_from = parse_optional_timestamp(args.get("from"), "from")
    if not window_from.ok:
        return window_from
    window_to = parse_optional_timestamp(args.get("to"), "to")
    if not window_to.ok:
        return window_to

    group_id = args.get("groupId")
    group_id = group_id.strip() if isinstance(group_id, str) else ""
    return Ok(
        SessionListFilters(
            tenant_id=tenant_id,
            group_id=group_id or None,
            window_from=window_from.value,
            window_to=window_to.value,
        )
    )
