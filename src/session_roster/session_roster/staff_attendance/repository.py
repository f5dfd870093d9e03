from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import StaffAttendanceStatus
from .model import RosterSource


class StaffAttendanceRepository(Protocol):
    def load_roster_source(self, *, session_id: str, tenant_id: str) -> Optional[RosterSource]:
        """Assignments (with user names) and recorded attendance; None if the
        session does not exist for this tenant."""

        raise NotImplementedError

    def list_assigned_user_ids(self, *, session_id: str, tenant_id: str) -> Optional[frozenset[str]]:
        """None when the session does not exist for this tenant."""

        raise NotImplementedError

    def upsert(
        self,
        *,
        tenant_id: str,
        session_id: str,
        staff_user_id: str,
        status: StaffAttendanceStatus,
        marked_by_user_id: str,
        marked_at: datetime,
    ) -> None:
        """Create or update the row keyed by (tenant_id, session_id, staff_user_id).

        Must rely on the store's unique key so concurrent marks never duplicate.
        """

        raise NotImplementedError
