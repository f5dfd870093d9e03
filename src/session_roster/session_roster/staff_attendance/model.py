from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import StaffAttendanceStatus


@dataclass(frozen=True)
class StaffMember:
    """Name fields of a user, as loosely populated as they come from the store."""

    user_id: str
    display_name: Optional[str] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


@dataclass(frozen=True)
class StaffAssignment:
    session_id: str
    user_id: str
    role: str
    staff: StaffMember


@dataclass(frozen=True)
class SessionStaffAttendance:
    """One row per (tenant, session, staff); updated in place on re-mark."""

    tenant_id: str
    session_id: str
    staff_user_id: str
    status: StaffAttendanceStatus
    marked_by_user_id: str
    marked_at: datetime


@dataclass(frozen=True)
class RosterSource:
    """Raw inputs for one session's roster, in assignment order."""

    session_id: str
    assignments: tuple[StaffAssignment, ...]
    attendance: tuple[SessionStaffAttendance, ...]


@dataclass(frozen=True)
class AttendanceMark:
    staff_user_id: str
    status: StaffAttendanceStatus


@dataclass(frozen=True)
class RosterItem:
    """Read-model row returned to callers."""

    staff_user_id: str
    display_name: str
    role_label: str
    attendance_status: StaffAttendanceStatus
    assigned: bool = True

    def to_dict(self) -> dict:
        return {
            "staffUserId": self.staff_user_id,
            "displayName": self.display_name,
            "roleLabel": self.role_label,
            "assigned": self.assigned,
            "attendanceStatus": self.attendance_status.value,
        }
