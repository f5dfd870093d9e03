from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from ..common.datetime_utils import now_utc
from ..core.exceptions import (
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
    translate_storage_error,
)
from ..roles.resolver import RoleResolver
from .model import RosterItem
from .repository import StaffAttendanceRepository
from .roster import RosterBuilder
from .validators import validate_attendance_mark

logger = logging.getLogger(__name__)


class StaffAttendanceService:
    def __init__(
        self,
        attendance: StaffAttendanceRepository,
        roles: RoleResolver,
        roster: RosterBuilder | None = None,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._roles = roles
        self._roster = roster or RosterBuilder(attendance)
        self._clock = clock

    def get_roster(self, session_id: str, tenant_id: str) -> list[RosterItem]:
        return self._roster.get_roster(session_id, tenant_id)

    def upsert(self, session_id: str, tenant_id: str, acting_user_id: str, payload: Any) -> list[RosterItem]:
        """Mark one staff member's attendance and return the rebuilt roster.

        Gates, in order: role grant for the acting user, session visible to
        the tenant, target staff assigned to the session. Only then one
        idempotent upsert; repeated marks overwrite (last writer wins).
        """
        mark = validate_attendance_mark(payload).unwrap()

        try:
            if not self._roles.can_mark_attendance(acting_user_id, tenant_id):
                logger.warning("user %s denied attendance write in tenant %s", acting_user_id, tenant_id)
                raise ForbiddenError(
                    "SITE_ADMIN, STAFF, or ORG_ADMIN role required to mark staff attendance. "
                    "VIEWER cannot affect attendance."
                )

            assigned = self._attendance.list_assigned_user_ids(session_id=session_id, tenant_id=tenant_id)
            if assigned is None:
                raise NotFoundError("Session not found")
            if mark.staff_user_id not in assigned:
                raise ValidationError("Staff member is not assigned to this session")

            self._attendance.upsert(
                tenant_id=tenant_id,
                session_id=session_id,
                staff_user_id=mark.staff_user_id,
                status=mark.status,
                marked_by_user_id=acting_user_id,
                marked_at=self._clock(),
            )
        except StorageError as e:
            raise translate_storage_error(e, entity="staff attendance", action="mark") from e

        logger.info(
            "staff %s marked %s in session %s by %s",
            mark.staff_user_id,
            mark.status.value,
            session_id,
            acting_user_id,
        )
        return self._roster.get_roster(session_id, tenant_id)
