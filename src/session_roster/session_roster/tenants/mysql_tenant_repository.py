from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Group, Tenant
from .repository import GroupRepository, TenantRepository


class MySQLTenantRepository(TenantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, org_id, name FROM tenants WHERE id=%s", (tenant_id,))
            r = fetchone(cur)
            if not r:
                return None
            return Tenant(tenant_id=r["id"], org_id=r["org_id"], name=r["name"])


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_owned(self, *, tenant_id: str, group_ids: Sequence[str]) -> Sequence[Group]:
        ids = list(dict.fromkeys(group_ids))
        if not ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, tenant_id, name, min_age, max_age
                FROM tenant_groups
                WHERE tenant_id=%s AND id IN ({in_clause(ids)})
                """,
                (tenant_id, *ids),
            )
            return [
                Group(
                    group_id=r["id"],
                    tenant_id=r["tenant_id"],
                    name=r["name"],
                    min_age=r.get("min_age"),
                    max_age=r.get("max_age"),
                )
                for r in fetchall(cur)
            ]
