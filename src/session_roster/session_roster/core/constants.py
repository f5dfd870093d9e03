"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

AV30_SOFT_CAP_RATIO = 1.0
AV30_GRACE_RATIO = 1.1
AV30_HARD_CAP_RATIO = 1.2
AV30_GRACE_DAYS = 14

MAX_BULK_SESSIONS = 100
MAX_TITLE_LENGTH = 200

DEFAULT_ROLE_LOOKUP_WORKERS = 3
STAFF_ID_PREFIX_LENGTH = 8
