"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000

DEFAULT_LATE_GRACE_MINUTES = 5
MAX_LATE_GRACE_MINUTES = 60
DEFAULT_EARLY_TOLERANCE_MINUTES = 60

DEFAULT_FACE_MATCH_THRESHOLD = 90.0
DEFAULT_FACE_MAX_MATCHES = 1
DEFAULT_COLLECTION_PREFIX = "skyhr_org_"

# Historical shared QR secret; only development/testing settings may fall back to it.
DEFAULT_QR_SECRET = "skyhr-secret-2024"

QR_IMAGE_BOX_SIZE = 8
QR_IMAGE_BORDER = 2
