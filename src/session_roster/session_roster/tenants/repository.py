from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group, Tenant


class TenantRepository(Protocol):
    def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        raise NotImplementedError


class GroupRepository(Protocol):
    def list_owned(self, *, tenant_id: str, group_ids: Sequence[str]) -> Sequence[Group]:
        """Return the subset of ``group_ids`` owned by ``tenant_id``.

        Ids belonging to other tenants, or to nobody, are simply absent from
        the result; callers compare lengths to detect them.
        """

        raise NotImplementedError
