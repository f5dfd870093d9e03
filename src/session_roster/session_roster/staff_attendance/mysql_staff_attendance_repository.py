from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import StaffAttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import RosterSource, SessionStaffAttendance, StaffAssignment, StaffMember
from .repository import StaffAttendanceRepository


class MySQLStaffAttendanceRepository(StaffAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _session_exists(cur, *, session_id: str, tenant_id: str) -> bool:
        cur.execute("SELECT id FROM sessions WHERE id=%s AND tenant_id=%s", (session_id, tenant_id))
        return fetchone(cur) is not None

    def load_roster_source(self, *, session_id: str, tenant_id: str) -> Optional[RosterSource]:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._session_exists(cur, session_id=session_id, tenant_id=tenant_id):
                return None

            cur.execute(
                """
                SELECT
                    sa.session_id, sa.user_id, sa.role,
                    u.display_name, u.name, u.first_name, u.last_name
                FROM staff_assignments sa
                JOIN users u ON u.id = sa.user_id
                WHERE sa.session_id=%s
                ORDER BY sa.created_at ASC, sa.id ASC
                """,
                (session_id,),
            )
            assignments = tuple(
                StaffAssignment(
                    session_id=r["session_id"],
                    user_id=r["user_id"],
                    role=r.get("role") or "",
                    staff=StaffMember(
                        user_id=r["user_id"],
                        display_name=r.get("display_name"),
                        name=r.get("name"),
                        first_name=r.get("first_name"),
                        last_name=r.get("last_name"),
                    ),
                )
                for r in fetchall(cur)
            )

            cur.execute(
                """
                SELECT tenant_id, session_id, staff_user_id, status, marked_by_user_id, marked_at
                FROM session_staff_attendance
                WHERE tenant_id=%s AND session_id=%s
                """,
                (tenant_id, session_id),
            )
            attendance = tuple(
                SessionStaffAttendance(
                    tenant_id=r["tenant_id"],
                    session_id=r["session_id"],
                    staff_user_id=r["staff_user_id"],
                    status=StaffAttendanceStatus(r["status"]),
                    marked_by_user_id=r["marked_by_user_id"],
                    marked_at=r["marked_at"],
                )
                for r in fetchall(cur)
            )

            return RosterSource(session_id=session_id, assignments=assignments, attendance=attendance)

    def list_assigned_user_ids(self, *, session_id: str, tenant_id: str) -> Optional[frozenset[str]]:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._session_exists(cur, session_id=session_id, tenant_id=tenant_id):
                return None
            cur.execute("SELECT user_id FROM staff_assignments WHERE session_id=%s", (session_id,))
            return frozenset(r["user_id"] for r in fetchall(cur))

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
        # Last writer wins; the unique key keeps this to one row per triple.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO session_staff_attendance(
                    tenant_id, session_id, staff_user_id, status, marked_by_user_id, marked_at
                )
                VALUES(%s,%s,%s,%s,%s,%s) AS incoming
                ON DUPLICATE KEY UPDATE
                    status=incoming.status,
                    marked_by_user_id=incoming.marked_by_user_id,
                    marked_at=incoming.marked_at
                """,
                (tenant_id, session_id, staff_user_id, status.value, marked_by_user_id, marked_at),
            )
