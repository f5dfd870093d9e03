from __future__ import annotations

from typing import Optional, Protocol


class SiteMembershipSource(Protocol):
    def get_site_role(self, *, user_id: str, tenant_id: str) -> Optional[str]:
        """Raw role string of the user's site membership, or None."""

        raise NotImplementedError


class OrgMembershipSource(Protocol):
    def get_org_role(self, *, user_id: str, org_id: str) -> Optional[str]:
        raise NotImplementedError


class LegacyTenantRoleSource(Protocol):
    """Older per-tenant role table; still consulted alongside the new memberships."""

    def get_legacy_role(self, *, user_id: str, tenant_id: str) -> Optional[str]:
        raise NotImplementedError
