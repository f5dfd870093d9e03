from __future__ import annotations

import re
from typing import Optional

from ..core.constants import STAFF_ID_PREFIX_LENGTH
from ..core.enums import StaffAttendanceStatus
from ..core.exceptions import NotFoundError, StorageError, translate_storage_error
from .model import RosterItem, StaffMember
from .repository import StaffAttendanceRepository

_EMAIL_RE = re.compile(r"^[^@]+@[^@]+\.[^@]+$")

_ROLE_LABELS = {
    "LEAD": "Lead",
    "SUPPORT": "Support",
    "TEACHER": "Lead",
    "ADMIN": "Lead",
    "COORDINATOR": "Coordinator",
}


def role_label(role: Optional[str]) -> str:
    """Human label for an assignment role; unknown roles read as Support."""
    return _ROLE_LABELS.get((role or "").strip().upper(), "Support")


def looks_like_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value.strip()))


def display_name(staff: StaffMember) -> str:
    """Pick a label that is never empty and never an email address.

    displayName (unless it is an email) -> name -> "First Last" ->
    "Staff <id prefix>".
    """
    if staff.display_name and staff.display_name.strip() and not looks_like_email(staff.display_name):
        return staff.display_name.strip()
    if staff.name and staff.name.strip():
        return staff.name.strip()

    parts = " ".join(p.strip() for p in (staff.first_name, staff.last_name) if p and p.strip())
    if parts:
        return parts
    return f"Staff {staff.user_id[:STAFF_ID_PREFIX_LENGTH]}"


class RosterBuilder:
    def __init__(self, attendance: StaffAttendanceRepository):
        self._attendance = attendance

    def get_roster(self, session_id: str, tenant_id: str) -> list[RosterItem]:
        try:
            source = self._attendance.load_roster_source(session_id=session_id, tenant_id=tenant_id)
        except StorageError as e:
            raise translate_storage_error(e, entity="session", action="load roster for") from e
        if source is None:
            raise NotFoundError("Session not found")

        status_by_staff = {row.staff_user_id: row.status for row in source.attendance}

        # Only assigned staff appear, in assignment order.
        return [
            RosterItem(
                staff_user_id=a.user_id,
                display_name=display_name(a.staff),
                role_label=role_label(a.role),
                attendance_status=status_by_staff.get(a.user_id, StaffAttendanceStatus.UNKNOWN),
            )
            for a in source.assignments
        ]
