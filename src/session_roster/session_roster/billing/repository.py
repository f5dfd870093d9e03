from __future__ import annotations

from typing import Optional, Protocol

from .model import OrgEntitlements


class EntitlementsSource(Protocol):
    def get_for_org(self, org_id: str) -> Optional[OrgEntitlements]:
        raise NotImplementedError
