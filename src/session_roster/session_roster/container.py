from __future__ import annotations

from dataclasses import dataclass

from .billing.mysql_entitlements_repository import MySQLEntitlementsRepository
from .billing.service import Av30EnforcementService
from .core.constants import DEFAULT_ROLE_LOOKUP_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .roles.mysql_role_repository import (
    MySQLLegacyTenantRoleRepository,
    MySQLOrgMembershipRepository,
    MySQLSiteMembershipRepository,
)
from .roles.resolver import RoleResolver
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.service import SessionService
from .staff_attendance.mysql_staff_attendance_repository import MySQLStaffAttendanceRepository
from .staff_attendance.roster import RosterBuilder
from .staff_attendance.service import StaffAttendanceService
from .tenants.mysql_tenant_repository import MySQLGroupRepository, MySQLTenantRepository


@dataclass(frozen=True)
class Container:
    """Process-wide wiring. Nothing here keeps per-request state."""

    session_service: SessionService
    role_resolver: RoleResolver
    roster_builder: RosterBuilder
    staff_attendance_service: StaffAttendanceService


def build_container(*, db_config: dict, role_lookup_workers: int = DEFAULT_ROLE_LOOKUP_WORKERS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    tenants_repo = MySQLTenantRepository(conn)
    groups_repo = MySQLGroupRepository(conn)
    sessions_repo = MySQLSessionRepository(conn)
    attendance_repo = MySQLStaffAttendanceRepository(conn)

    entitlement_gate = Av30EnforcementService(MySQLEntitlementsRepository(conn))
    session_service = SessionService(
        sessions_repo,
        tenants_repo,
        groups_repo,
        entitlements=entitlement_gate,
    )

    role_resolver = RoleResolver(
        tenants_repo,
        MySQLSiteMembershipRepository(conn),
        MySQLOrgMembershipRepository(conn),
        MySQLLegacyTenantRoleRepository(conn),
        max_workers=role_lookup_workers,
    )
    roster_builder = RosterBuilder(attendance_repo)
    staff_attendance_service = StaffAttendanceService(attendance_repo, role_resolver, roster_builder)

    return Container(
        session_service=session_service,
        role_resolver=role_resolver,
        roster_builder=roster_builder,
        staff_attendance_service=staff_attendance_service,
    )
