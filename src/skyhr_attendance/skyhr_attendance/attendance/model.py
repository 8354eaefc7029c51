from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import AttendanceSource, AttendanceStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one check-in (and optional check-out) of a user in an organization.

    Rows are never hard-deleted; ``deleted_at`` marks a soft delete.
    """

    event_id: str
    user_id: str
    organization_id: str
    work_date: date
    check_in: datetime
    check_out: Optional[datetime]
    status: AttendanceStatus
    source: AttendanceSource
    is_verified: bool = False
    shift_id: Optional[int] = None
    geofence_id: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    distance_to_geofence_m: Optional[int] = None
    is_within_geofence: Optional[bool] = None
    face_confidence: Optional[str] = None
    liveness_score: Optional[str] = None
    spoof_flag: bool = False
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        """Checked in, not checked out. Absence rows are never open sessions."""
        return (
            self.check_out is None
            and self.deleted_at is None
            and self.status != AttendanceStatus.ABSENT
        )

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "user_id": self.user_id,
            "organization_id": self.organization_id,
            "check_in": isoformat_or_none(self.check_in),
            "check_out": isoformat_or_none(self.check_out),
            "status": self.status.value,
            "source": self.source.value,
            "is_verified": self.is_verified,
            "shift_id": self.shift_id,
            "is_within_geofence": self.is_within_geofence,
            "distance_to_geofence_m": self.distance_to_geofence_m,
            "face_confidence": self.face_confidence,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class NewAttendanceEvent:
    """Fields supplied by callers when recording a new event; the id is derived."""

    user_id: str
    organization_id: str
    check_in: datetime
    status: AttendanceStatus
    source: AttendanceSource
    is_verified: bool = False
    shift_id: Optional[int] = None
    geofence_id: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    distance_to_geofence_m: Optional[int] = None
    is_within_geofence: Optional[bool] = None
    face_confidence: Optional[str] = None
    spoof_flag: bool = False
    notes: Optional[str] = None
    # Defaults to the check-in's calendar day.
    work_date: Optional[date] = None
