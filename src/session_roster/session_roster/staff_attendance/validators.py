from __future__ import annotations

from typing import Any, Mapping

from ..common.validators import require_non_empty
from ..core.enums import StaffAttendanceStatus
from ..core.result import Err, Ok, Result
from .model import AttendanceMark

_ALLOWED = ", ".join(s.value for s in StaffAttendanceStatus)


def parse_attendance_status(value: Any) -> Result[StaffAttendanceStatus]:
    if not isinstance(value, str):
        return Err(f"status must be one of {_ALLOWED}")
    try:
        return Ok(StaffAttendanceStatus(value.strip().upper()))
    except ValueError:
        return Err(f"status must be one of {_ALLOWED}")


def validate_attendance_mark(payload: Any) -> Result[AttendanceMark]:
    if not isinstance(payload, Mapping):
        return Err("invalid body")

    staff_user_id = require_non_empty(payload.get("staffUserId"), "staffUserId")
    if not staff_user_id.ok:
        return staff_user_id
    status = parse_attendance_status(payload.get("status"))
    if not status.ok:
        return status

    return Ok(AttendanceMark(staff_user_id=staff_user_id.value, status=status.value))
