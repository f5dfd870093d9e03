from __future__ import annotations

from enum import Enum


class SiteRole(str, Enum):
    """Role a user holds on a single site (tenant)."""

    SITE_ADMIN = "SITE_ADMIN"
    STAFF = "STAFF"
    VIEWER = "VIEWER"


class OrgRole(str, Enum):
    """Role a user holds across every site of an org."""

    ORG_ADMIN = "ORG_ADMIN"
    ORG_MEMBER = "ORG_MEMBER"


class LegacyTenantRole(str, Enum):
    """Roles from the older user/tenant role table."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    COORDINATOR = "COORDINATOR"
    PARENT = "PARENT"


class StaffAttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    UNKNOWN = "UNKNOWN"


class EntitlementStatus(str, Enum):
    OK = "OK"
    SOFT_CAP = "SOFT_CAP"
    GRACE = "GRACE"
    HARD_CAP = "HARD_CAP"


class StorageErrorCode(str, Enum):
    """Store failures surfaced at the repository boundary."""

    UNIQUE_VIOLATION = "UNIQUE_VIOLATION"
    FOREIGN_KEY_VIOLATION = "FOREIGN_KEY_VIOLATION"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"
