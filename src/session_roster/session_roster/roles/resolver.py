from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..core.constants import DEFAULT_ROLE_LOOKUP_WORKERS
from ..core.enums import LegacyTenantRole, OrgRole, SiteRole
from ..tenants.repository import TenantRepository
from .repository import LegacyTenantRoleSource, OrgMembershipSource, SiteMembershipSource

logger = logging.getLogger(__name__)

ATTENDANCE_WRITE_SITE_ROLES = frozenset({SiteRole.SITE_ADMIN.value, SiteRole.STAFF.value})
ATTENDANCE_WRITE_ORG_ROLES = frozenset({OrgRole.ORG_ADMIN.value})
ATTENDANCE_WRITE_LEGACY_ROLES = frozenset(
    {LegacyTenantRole.ADMIN.value, LegacyTenantRole.TEACHER.value, LegacyTenantRole.COORDINATOR.value}
)


def _grants(role: Optional[str], allowed: frozenset[str]) -> bool:
    return role is not None and role in allowed


class RoleResolver:
    """Decide whether a user may write staff attendance in a tenant.

    Three role sources coexist: site memberships, org memberships and the
    legacy tenant-role table. A grant from any one of them is enough; a
    missing or non-granting row in one source (VIEWER included) never
    cancels a grant from another. An unknown tenant fails closed.
    """

    def __init__(
        self,
        tenants: TenantRepository,
        site_memberships: SiteMembershipSource,
        org_memberships: OrgMembershipSource,
        legacy_roles: LegacyTenantRoleSource,
        *,
        max_workers: int = DEFAULT_ROLE_LOOKUP_WORKERS,
    ):
        self._tenants = tenants
        self._site = site_memberships
        self._org = org_memberships
        self._legacy = legacy_roles
        self._max_workers = max(1, int(max_workers))

    def can_mark_attendance(self, user_id: str, tenant_id: str) -> bool:
        tenant = self._tenants.get_by_id(tenant_id)
        if tenant is None:
            return False

        # Independent reads; each repository call opens its own connection.
        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="role-lookup") as pool:
            site_f = pool.submit(self._site.get_site_role, user_id=user_id, tenant_id=tenant_id)
            org_f = pool.submit(self._org.get_org_role, user_id=user_id, org_id=tenant.org_id)
            legacy_f = pool.submit(self._legacy.get_legacy_role, user_id=user_id, tenant_id=tenant_id)
            site_role, org_role, legacy_role = site_f.result(), org_f.result(), legacy_f.result()

        if _grants(site_role, ATTENDANCE_WRITE_SITE_ROLES):
            return True
        if _grants(org_role, ATTENDANCE_WRITE_ORG_ROLES):
            return True
        if _grants(legacy_role, ATTENDANCE_WRITE_LEGACY_ROLES):
            return True

        logger.debug(
            "no attendance grant for user %s in tenant %s (site=%s org=%s legacy=%s)",
            user_id,
            tenant_id,
            site_role,
            org_role,
            legacy_role,
        )
        return False
