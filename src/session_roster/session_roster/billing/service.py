from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Protocol

from ..core.constants import AV30_GRACE_DAYS, AV30_GRACE_RATIO, AV30_HARD_CAP_RATIO, AV30_SOFT_CAP_RATIO
from ..core.enums import EntitlementStatus
from ..core.exceptions import HardCapExceededError
from .model import EnforcementResult
from .repository import EntitlementsSource

logger = logging.getLogger(__name__)


class EntitlementGate(Protocol):
    def check_for_org(self, org_id: str) -> EnforcementResult:
        raise NotImplementedError

    def assert_within_hard_cap(self, result: EnforcementResult) -> None:
        raise NotImplementedError


class Av30EnforcementService(EntitlementGate):
    """Classify an org's active-user usage against its cap.

    Only HARD_CAP blocks anything; the softer states are informational.
    """

    def __init__(self, entitlements: EntitlementsSource):
        self._entitlements = entitlements

    def check_for_org(self, org_id: str) -> EnforcementResult:
        resolved = self._entitlements.get_for_org(org_id)
        cap = resolved.av30_cap if resolved else None
        usage = (resolved.current_av30 if resolved else None) or 0

        if not cap or cap <= 0:
            return EnforcementResult(
                org_id=org_id,
                status=EntitlementStatus.OK,
                message_code="av30.no_cap",
                current_av30=usage,
                av30_cap=cap,
            )

        ratio = usage / cap

        if ratio >= AV30_HARD_CAP_RATIO:
            status, code, grace_until = EntitlementStatus.HARD_CAP, "av30.hard_cap", None
        elif ratio >= AV30_GRACE_RATIO:
            status, code = EntitlementStatus.GRACE, "av30.grace"
            grace_until = self._grace_until(resolved.usage_calculated_at)
        elif ratio >= AV30_SOFT_CAP_RATIO:
            status, code, grace_until = EntitlementStatus.SOFT_CAP, "av30.soft_cap", None
        else:
            status, code, grace_until = EntitlementStatus.OK, "av30.ok", None

        return EnforcementResult(
            org_id=org_id,
            status=status,
            message_code=code,
            current_av30=usage,
            av30_cap=cap,
            grace_until=grace_until,
        )

    def assert_within_hard_cap(self, result: EnforcementResult) -> None:
        if result.status == EntitlementStatus.HARD_CAP:
            logger.warning("org %s over AV30 hard cap (%s/%s)", result.org_id, result.current_av30, result.av30_cap)
            raise HardCapExceededError(result.org_id)

    @staticmethod
    def _grace_until(calculated_at: Optional[datetime]) -> Optional[datetime]:
        if not calculated_at:
            return None
        return calculated_at + timedelta(days=AV30_GRACE_DAYS)
