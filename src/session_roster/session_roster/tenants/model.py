from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Tenant:
    """A site. Provisioned elsewhere; read-only here."""

    tenant_id: str
    org_id: str
    name: str


@dataclass(frozen=True)
class Group:
    group_id: str
    tenant_id: str
    name: str
    min_age: Optional[int] = None
    max_age: Optional[int] = None
