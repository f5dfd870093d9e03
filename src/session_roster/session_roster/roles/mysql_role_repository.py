from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import LegacyTenantRoleSource, OrgMembershipSource, SiteMembershipSource


class MySQLSiteMembershipRepository(SiteMembershipSource):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_site_role(self, *, user_id: str, tenant_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT role FROM site_memberships WHERE user_id=%s AND tenant_id=%s LIMIT 1",
                (user_id, tenant_id),
            )
            r = fetchone(cur)
            return str(r["role"]) if r else None


class MySQLOrgMembershipRepository(OrgMembershipSource):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_org_role(self, *, user_id: str, org_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT role FROM org_memberships WHERE user_id=%s AND org_id=%s LIMIT 1",
                (user_id, org_id),
            )
            r = fetchone(cur)
            return str(r["role"]) if r else None


class MySQLLegacyTenantRoleRepository(LegacyTenantRoleSource):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_legacy_role(self, *, user_id: str, tenant_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT role FROM user_tenant_roles WHERE user_id=%s AND tenant_id=%s LIMIT 1",
                (user_id, tenant_id),
            )
            r = fetchone(cur)
            return str(r["role"]) if r else None
