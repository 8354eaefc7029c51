from __future__ import annotations

from enum import Enum


class MemberRole(str, Enum):
    """Organization membership role used for authorization."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    ON_TIME = "on_time"
    LATE = "late"
    EARLY = "early"
    ABSENT = "absent"
    OUT_OF_BOUNDS = "out_of_bounds"


class AttendanceSource(str, Enum):
    QR_FACE = "qr_face"
    MANUAL = "manual"
    SYSTEM = "system"


class GeofenceType(str, Enum):
    CIRCULAR = "circular"


ADMIN_ROLES = frozenset({MemberRole.OWNER, MemberRole.ADMIN})

FLAGGED_STATUSES = (
    AttendanceStatus.OUT_OF_BOUNDS,
    AttendanceStatus.ABSENT,
    AttendanceStatus.LATE,
)
