from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import OrgEntitlements
from .repository import EntitlementsSource


class MySQLEntitlementsRepository(EntitlementsSource):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_org(self, org_id: str) -> Optional[OrgEntitlements]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT org_id, av30_cap, current_av30, usage_calculated_at
                FROM org_entitlements
                WHERE org_id=%s
                """,
                (org_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return OrgEntitlements(
                org_id=r["org_id"],
                av30_cap=r.get("av30_cap"),
                current_av30=r.get("current_av30"),
                usage_calculated_at=r.get("usage_calculated_at"),
            )
