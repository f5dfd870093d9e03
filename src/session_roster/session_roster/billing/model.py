from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EntitlementStatus


@dataclass(frozen=True)
class OrgEntitlements:
    """Cap and usage snapshot for an org; computed by the billing pipeline."""

    org_id: str
    av30_cap: Optional[int] = None
    current_av30: Optional[int] = None
    usage_calculated_at: Optional[datetime] = None


@dataclass(frozen=True)
class EnforcementResult:
    org_id: str
    status: EntitlementStatus
    message_code: str
    current_av30: Optional[int] = None
    av30_cap: Optional[int] = None
    grace_until: Optional[datetime] = None
